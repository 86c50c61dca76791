import os
from datetime import datetime
from typing import Any, Dict, Optional

import pandas as pd

from utils.data.json_manager import JSONManager


class OutputManager:
    _output_dir = "output"

    @staticmethod
    def configure(output_dir: str) -> None:
        """Change the base output directory (defaults to "./output")."""
        OutputManager._output_dir = output_dir

    @staticmethod
    def get_output_path(sub_dir: str, file_name: str, extension: str = "json") -> str:
        """
        Constructs a timestamped file path within the output directory,
        ensuring the subdirectory exists.

        Args:
            sub_dir (str): The subdirectory within the main output folder (e.g., 'activity-summary').
            file_name (str): The base name of the file, without timestamp or extension.
            extension (str): The file extension (default: 'json').

        Returns:
            str: The full, standardized path to the output file.
        """
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        full_file_name = f"{file_name}_{timestamp}.{extension}"

        target_dir = os.path.join(OutputManager._output_dir, sub_dir)
        os.makedirs(target_dir, exist_ok=True)

        return os.path.join(target_dir, full_file_name)

    @staticmethod
    def save_json_report(
        data: Dict[str, Any], sub_dir: str, file_basename: str, output_path: Optional[str] = None
    ) -> str:
        """
        Saves a dictionary as a JSON report.

        Args:
            data (Dict): The dictionary data to save.
            sub_dir (str): The subdirectory for the report.
            file_basename (str): The base name for the file.
            output_path (Optional[str]): Optional custom full path to save the file.

        Returns:
            str: The path where the file was saved.
        """
        path = output_path or OutputManager.get_output_path(sub_dir, file_basename, "json")
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)

        JSONManager.write_json(data, path)
        return path

    @staticmethod
    def save_csv_report(
        rows: list[dict[str, Any]], sub_dir: str, file_basename: str, output_path: Optional[str] = None
    ) -> str:
        """
        Saves a list of flat rows as a CSV table.

        Returns:
            str: The path where the file was saved.
        """
        path = output_path or OutputManager.get_output_path(sub_dir, file_basename, "csv")
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)

        pd.DataFrame(rows).to_csv(path, index=False, encoding="utf-8")
        return path
