from kiln import *
from kiln.listing import print_context

__prog__ = "kiln"


class Project(Base):
    # List every recipe.
    def list(self):
        print_context(self.context)

    # Greet someone a number of times.
    # @param name [String] who to greet.
    # @param count [Integer] number of repetitions.
    # @param loud [Boolean] shout the greeting.
    def greet(self, name, *, count=1, loud=False):
        for _ in range(count):
            print(f"hello, {name}!".upper() if loud else f"hello, {name}!")


class Release(Base, path="release"):
    # Cut a release: build, then publish.
    # @param version [String] the version to release.
    def release(self, version):
        self.call("release:build", version, "release:publish", f"tag=v{version}")

    @recipe(description="Build the distribution.")
    def build(self, version):
        print(f"building {version}")

    # Publish the built distribution.
    # @param dry [Boolean] only print what would happen.
    def publish(self, **options):
        print(f"publishing {options}")


if __name__ == '__main__':
    invoke(Context(Project, Release, shell=True, colorful=True))
