"""
Configuration repository for loading and saving the application config.

Handles file I/O and turns pydantic validation failures into ValueError.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict

from pydantic import ValidationError

from clinreview.domain.config import AppConfig

logger = logging.getLogger(__name__)

CONFIG_NAME = "clinreview"


def _strip_comments(jsonc_content: str) -> str:
    """Drop full-line // comments from JSONC content."""
    lines = [
        line for line in jsonc_content.splitlines()
        if not line.lstrip().startswith("//")
    ]
    return "\n".join(lines)


class ConfigRepository:
    """
    Repository for configuration file operations.

    Looks for `clinreview.json`, then `clinreview.jsonc`, in `config_dir`.
    """

    def __init__(self, config_dir: Path | str):
        self.config_dir = Path(config_dir)

    def load_json_file(self, filename: str = CONFIG_NAME) -> Dict[str, Any]:
        """
        Load a JSON or JSONC file.

        Raises:
            FileNotFoundError: If neither file exists
            ValueError: If the file cannot be parsed
        """
        json_path = self.config_dir / f"{filename}.json"
        jsonc_path = self.config_dir / f"{filename}.jsonc"

        for path, is_jsonc in ((json_path, False), (jsonc_path, True)):
            if not path.exists():
                continue
            content = path.read_text(encoding="utf-8")
            if is_jsonc:
                content = _strip_comments(content)
            try:
                return json.loads(content)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON in {path}: {e}") from e

        raise FileNotFoundError(
            f"Config file '{filename}.json' or '{filename}.jsonc' not found in {self.config_dir}"
        )

    def load_app_config(self) -> AppConfig:
        """
        Load and validate the application config.

        Relative database and log paths are resolved against the config directory.
        """
        data = self.load_json_file(CONFIG_NAME)
        try:
            config = AppConfig.model_validate(data)
        except ValidationError as e:
            raise ValueError(f"Invalid configuration in {self.config_dir}: {e}") from e

        if not config.db_path.is_absolute():
            config = config.model_copy(update={"db_path": self.config_dir / config.db_path})
        if config.log_file and not Path(config.log_file).is_absolute():
            config = config.model_copy(update={"log_file": str(self.config_dir / config.log_file)})

        logger.info("Loaded configuration, database: %s", config.db_path)
        return config

    def save_app_config(self, config: AppConfig) -> Path:
        """Write the config as JSON and return the file path."""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        path = self.config_dir / f"{CONFIG_NAME}.json"
        path.write_text(
            json.dumps(config.model_dump(mode="json"), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        logger.debug("Saved configuration to %s", path)
        return path
