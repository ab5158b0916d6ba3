import json
import os
import shutil
import threading
import time
from datetime import datetime
from typing import Any, List, Optional


class SmartLogger:
    """
    Process-wide structured logger.

    Every entry is a JSON object (timestamp, level, message, category,
    params_summary). Entries are printed to the console and, when file output
    is enabled, appended to a JSONL file. Params larger than
    ``max_inline_chars`` are written to a separate detail file and only their
    shape is kept inline.

    All knobs can be passed to the constructor or through
    ``SMART_LOGGER_<NAME>`` environment variables.
    """

    SMART_LOGGER_BLACKLIST_MESSAGES: List[str] = []
    LEVEL_PRIORITY = {
        "DEBUG": 0,
        "INFO": 1,
        "WARNING": 2,
        "ERROR": 3,
        "CRITICAL": 4,
    }
    _instance = None

    @classmethod
    def instance(cls):
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def configure(cls, **kwargs):
        """Replace the shared instance with one built from explicit options."""
        cls._instance = cls(**kwargs)
        return cls._instance

    @classmethod
    def log(cls, level, message, category=None, params=None, max_inline_chars=100):
        cls.instance()._log(level, message, category, params, max_inline_chars)

    def __init__(
        self,
        main_log_path=None,
        detail_log_dir=None,
        min_level=None,
        include_all_min_level=None,
        console_output=None,
        file_output=None,
        remove_log_on_create=None,
        blacklist_messages=None,
    ):
        self.main_log_path = self._get_env_variable(
            main_log_path, "MAIN_LOG_PATH", "logs/app_flow.jsonl"
        )
        self.detail_log_dir = self._get_env_variable(
            detail_log_dir, "DETAIL_LOG_DIR", "logs/details"
        )
        self.min_level = self._get_env_variable(min_level, "MIN_LEVEL", "INFO")
        self.include_all_min_level = self._get_env_variable(
            include_all_min_level, "INCLUDE_ALL_MIN_LEVEL", "ERROR"
        )
        self.console_output = self._get_flag(console_output, "CONSOLE_OUTPUT", True)
        self.file_output = self._get_flag(file_output, "FILE_OUTPUT", False)
        self.remove_log_on_create = self._get_flag(
            remove_log_on_create, "REMOVE_LOG_ON_CREATE", False
        )

        self._lock = threading.Lock()
        self._last_timestamp = None
        self._timestamp_counter = 0
        self.blacklist_messages = self._load_blacklist_messages(blacklist_messages)

        if self.file_output:
            dir_paths = [os.path.dirname(self.main_log_path), self.detail_log_dir]
            for dir_path in dir_paths:
                if self.remove_log_on_create and dir_path and os.path.exists(dir_path):
                    shutil.rmtree(dir_path)
            for dir_path in dir_paths:
                if dir_path:
                    os.makedirs(dir_path, exist_ok=True)

    def _get_env_variable(self, direct_value: Optional[str], env_key: str, default: str) -> str:
        if direct_value is not None:
            return direct_value
        return os.environ.get(f"SMART_LOGGER_{env_key}", default)

    def _get_flag(self, direct_value: Optional[bool], env_key: str, default: bool) -> bool:
        if direct_value is not None:
            return bool(direct_value)
        return self._get_env_variable(None, env_key, str(default)) == "True"

    def _load_blacklist_messages(self, direct_value: Optional[Any] = None) -> List[str]:
        """
        Substrings that suppress a log entry when found in its message.

        Accepts an iterable of strings, a JSON array string, or a comma
        separated string. Falls back to SMART_LOGGER_BLACKLIST_MESSAGES.
        """
        raw = direct_value
        if raw is None:
            raw = os.environ.get("SMART_LOGGER_BLACKLIST_MESSAGES")
            if raw is None:
                return list(self.SMART_LOGGER_BLACKLIST_MESSAGES)

        if isinstance(raw, str):
            raw_str = raw.strip()
            if not raw_str:
                return []
            try:
                parsed = json.loads(raw_str)
                items = parsed if isinstance(parsed, list) else []
            except json.JSONDecodeError:
                items = raw_str.split(",")
        else:
            items = list(raw)

        return [str(item).strip() for item in items if item is not None and str(item).strip()]

    def _is_message_blacklisted(self, message: Any) -> bool:
        if not self.blacklist_messages:
            return False
        msg = "" if message is None else str(message)
        return any(needle in msg for needle in self.blacklist_messages)

    def _generate_unique_trace_id(self):
        # Same-second ids get a running suffix: 1700000000_1, 1700000000_2, ...
        current_timestamp = str(int(time.time()))

        if self._last_timestamp == current_timestamp:
            self._timestamp_counter += 1
        else:
            self._last_timestamp = current_timestamp
            self._timestamp_counter = 1

        return f"{current_timestamp}_{self._timestamp_counter}"

    def _save_detail_payload(self, trace_id, payload):
        if not self.file_output:
            return None

        filepath = os.path.join(self.detail_log_dir, f"{trace_id}.json")
        try:
            with open(filepath, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=2, default=str)
            return f"{trace_id}.json"
        except OSError as e:
            return f"Error saving detail: {e}"

    def _should_log(self, level):
        level_priority = self.LEVEL_PRIORITY.get(level.upper(), 1)
        min_priority = self.LEVEL_PRIORITY.get(self.min_level.upper(), 0)
        return level_priority >= min_priority

    def _should_include_all(self, level):
        level_priority = self.LEVEL_PRIORITY.get(level.upper(), 1)
        min_priority = self.LEVEL_PRIORITY.get(self.include_all_min_level.upper(), 3)
        return level_priority >= min_priority

    def _log(self, level, message, category=None, params=None, max_inline_chars=100):
        """
        Args:
            level (str): DEBUG, INFO, WARNING, ERROR or CRITICAL.
            message (str): log message.
            category (str): dotted category, e.g. "executor.list".
            params (dict): structured details.
            max_inline_chars (int): params longer than this are moved to a detail file.
        """
        if self._is_message_blacklisted(str(message) + (category or "")):
            return

        if not self._should_log(level):
            return

        log_entry = {
            "timestamp": datetime.now().isoformat(),
            "level": level,
            "message": "" if message is None else str(message),
        }

        if category:
            log_entry["category"] = category

        if params:
            if len(str(params)) <= max_inline_chars or self._should_include_all(level):
                log_entry["params_summary"] = params
            else:
                trace_id = self._generate_unique_trace_id()
                detail_filename = self._save_detail_payload(trace_id, params)

                if detail_filename is None:
                    log_entry["detail_save_error"] = "file_output_disabled"
                elif detail_filename.startswith("Error"):
                    log_entry["detail_save_error"] = detail_filename
                else:
                    log_entry["has_detail_file"] = True
                    log_entry["detail_ref"] = detail_filename

                if isinstance(params, dict):
                    log_entry["params_summary"] = {"keys": list(params.keys())}
                elif isinstance(params, (list, tuple)):
                    log_entry["params_summary"] = {"type": type(params).__name__, "length": len(params)}
                else:
                    log_entry["params_summary"] = {"type": type(params).__name__}

        if self.file_output:
            with self._lock:
                with open(self.main_log_path, "a", encoding="utf-8") as f:
                    f.write(json.dumps(log_entry, ensure_ascii=False, default=str) + "\n")

        if self.console_output:
            category_str = f"[{category}]" if category else ""
            if params and log_entry.get("params_summary") is params:
                print(f"[{level}]{category_str} {message} {params}")
            else:
                print(f"[{level}]{category_str} {message}")
