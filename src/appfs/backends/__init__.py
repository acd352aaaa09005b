from appfs.backends.local import LocalFileSystemPlatform

__all__ = ["LocalFileSystemPlatform"]
