"""
Configuration store for dnsguard
Owns the live Configuration, guards it, loads it and writes it back
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

from ..core.config import Settings
from ..core.exceptions import ConfigParseError, ConfigReadError, ConfigWriteError
from ..core.fileutil import read_file_if_exists, safe_write_file
from ..core.logging import get_logger
from ..core.rwlock import ReadWriteLock
from ..models.config import Configuration, CURRENT_SCHEMA_VERSION, LogSettings
from ..models.schema import dump_config, parse_config_document, parse_log_settings
from .filter_service import normalize_filters
from .user_filter import UserFilter


logger = get_logger(__name__)

# marks "no bytes supplied", as opposed to None for "file absent"
_UNSET = object()


class ConfigService:
    """The single shared Configuration and its access discipline.

    Readers go through read() or snapshot(); mutations go through update(),
    which holds the lock exclusively until the change has been persisted.
    While first_run is set nothing is written to disk.
    """

    def __init__(self, settings: Optional[Settings] = None, config: Optional[Configuration] = None):
        self.settings = settings or Settings()
        self._config = config if config is not None else Configuration()
        self._lock = ReadWriteLock()
        self._first_run = False

    # Paths
    def get_config_filename(self) -> Path:
        """Path to the current config file"""
        return self.settings.config_path

    @property
    def filter_dir(self) -> Path:
        return self.settings.filter_dir

    @property
    def first_run(self) -> bool:
        with self._lock.read_locked():
            return self._first_run

    @first_run.setter
    def first_run(self, value: bool) -> None:
        with self._lock.write_locked():
            self._first_run = bool(value)

    def detect_first_run(self) -> bool:
        """First run means there is no configuration file yet"""
        return not self.get_config_filename().exists()

    # Loading
    def read_config_file(self) -> Optional[bytes]:
        """Read config file contents, or None if it doesn't exist"""
        config_file = self.get_config_filename()
        try:
            return read_file_if_exists(config_file)
        except OSError as e:
            raise ConfigReadError(f"Couldn't read config file {config_file}: {e}") from e

    def get_log_settings(self, data=_UNSET) -> LogSettings:
        """Read logging settings from the config file.

        Done separately so that the logger can be configured before the
        actual configuration is parsed and applied. Pass the bytes already
        read (None for an absent file) to avoid reading it again. Read errors
        yield defaults.
        """
        if data is _UNSET:
            try:
                data = self.read_config_file()
            except ConfigReadError as e:
                logger.warning(str(e))
                return LogSettings()
        return parse_log_settings(data)

    def parse_config(self, data=_UNSET) -> None:
        """Load the configuration file over the current values.

        Fields missing from the file keep their current values. A missing
        file is not an error. On any error the store is left unchanged.
        data takes the same values as in get_log_settings.
        """
        config_file = self.get_config_filename()
        logger.info(f"Reading config file: {config_file}")
        if data is _UNSET:
            try:
                data = self.read_config_file()
            except ConfigReadError as e:
                logger.error(str(e))
                raise
        if data is None:
            logger.info("YAML file doesn't exist, skipping it")
            return

        with self._lock.write_locked():
            try:
                loaded = parse_config_document(data, self._config)
            except ConfigParseError as e:
                logger.error(f"Couldn't parse config file: {e}")
                raise

            normalize_filters(loaded.filters)
            loaded.tls.status = self._config.tls.status
            self._replace(loaded)

            if loaded.schema_version != CURRENT_SCHEMA_VERSION:
                logger.warning(
                    f"Config schema version {loaded.schema_version} differs from "
                    f"{CURRENT_SCHEMA_VERSION}, the file may need an upgrade"
                )

    def _replace(self, new: Configuration) -> None:
        # Keep the same object so handles held by other components stay live
        for name in Configuration.model_fields:
            setattr(self._config, name, getattr(new, name))

    # Access
    @contextmanager
    def read(self) -> Iterator[Configuration]:
        """Shared access to the live configuration; do not mutate it"""
        with self._lock.read_locked():
            yield self._config

    def snapshot(self) -> Configuration:
        """A deep copy of the current configuration"""
        with self._lock.read_locked():
            return self._config.model_copy(deep=True)

    @contextmanager
    def update(self, persist: bool = True) -> Iterator[Configuration]:
        """Exclusive access for a mutation.

        If the block raises, the configuration is restored to its previous
        state. Otherwise it is persisted before the lock is released.
        """
        with self._lock.write_locked():
            backup = self._config.model_copy(deep=True)
            try:
                yield self._config
            except BaseException:
                self._replace(backup)
                logger.debug("Configuration update failed, rolled back")
                raise
            if persist:
                self._write_locked()

    # Persistence
    def write(self) -> None:
        """Save the configuration and the user rules to their files"""
        with self._lock.write_locked():
            self._write_locked()

    def finish_first_run(self) -> None:
        """Leave first-run mode and persist the configuration set up so far"""
        with self._lock.write_locked():
            self._first_run = False
            self._write_locked()
        logger.info("Initial setup complete, configuration saved")

    def user_filter(self) -> UserFilter:
        with self._lock.read_locked():
            return UserFilter(self.filter_dir, self._config.user_rules)

    def _write_locked(self) -> None:
        if self._first_run:
            logger.debug("Silently refusing to write config because first run and not configured yet")
            return

        errors: List[Exception] = []

        config_file = self.get_config_filename()
        logger.debug(f"Writing YAML file: {config_file}")
        try:
            safe_write_file(config_file, dump_config(self._config))
        except Exception as e:
            logger.error(f"Couldn't save YAML config: {e}")
            errors.append(e)

        user_filter = UserFilter(self.filter_dir, self._config.user_rules)
        try:
            user_filter.save()
        except Exception as e:
            logger.error(f"Couldn't save the user filter: {e}")
            errors.append(e)

        if errors:
            raise ConfigWriteError(
                "; ".join(str(e) for e in errors),
                errors=errors,
            )
