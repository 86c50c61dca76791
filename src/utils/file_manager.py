import os
from typing import List, Optional


class FileManager:
    """
    General file management operations used by logging and report output.
    """

    @staticmethod
    def list_files(directory: str, extension: Optional[str] = None) -> List[str]:
        """
        Lists all files in a directory with an optional filter by extension.

        Args:
            directory (str): Path to the directory.
            extension (Optional[str]): File extension to filter by (e.g., ".json").

        Returns:
            List[str]: List of file paths that match the filter.

        Raises:
            FileNotFoundError: If the directory does not exist.
        """
        if not os.path.exists(directory):
            raise FileNotFoundError(f"Directory not found: {directory}")
        return sorted(
            os.path.join(directory, f)
            for f in os.listdir(directory)
            if os.path.isfile(os.path.join(directory, f))
            and (extension is None or f.endswith(extension))
        )

    @staticmethod
    def create_folder(folder_path: str, exist_ok: bool = True) -> None:
        """
        Creates a folder (and its parents).

        Args:
            folder_path (str): Path of the folder to create.
            exist_ok (bool): Do not fail if the folder already exists. Defaults to True.
        """
        os.makedirs(folder_path, exist_ok=exist_ok)
