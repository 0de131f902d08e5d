from autoinject import injector
from storls.storage.base import BaseStorageHandle
from storls.storage.azure_blob import AzureBlobHandle
from storls.storage.local import LocalHandle
import typing as t
import pathlib
from storls.util import HaltFlag


@injector.injectable_global
class StorageController:
    """Controller class that identifies the correct handler for a given string.

        https://ACCOUNT.blob.core.windows.net[/CONTAINER[/PREFIX]] -> AzureBlobHandle
        file://PATH -> LocalHandle
        (default or path-like) -> LocalHandle
    """

    def __init__(self):
        self.handle_classes = [
            AzureBlobHandle,
        ]
        self.default_handle = LocalHandle

    def get_handle(self, file_path: t.Union[str, pathlib.Path], halt_flag: HaltFlag = None) -> BaseStorageHandle:
        """Build an appropriate handle for the given file path."""
        if isinstance(file_path, pathlib.Path):
            return LocalHandle(file_path, halt_flag=halt_flag)
        for cls in self.handle_classes:
            if cls.supports(file_path):
                return cls.build(file_path, halt_flag=halt_flag)
        return self.default_handle.build(file_path, halt_flag=halt_flag)
