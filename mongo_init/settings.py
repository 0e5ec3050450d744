import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .errors import ConfigError

CONFIG_FILE = Path(__file__).with_name('mongo_servers.yml')

DEFAULT_HOST = 'localhost'
DEFAULT_PORT = 27017
DEFAULT_REPLICA_SET = 'rs0'
DEFAULT_WAIT_ATTEMPTS = 60
DEFAULT_WAIT_INTERVAL_MS = 1000

# Literal fallbacks for unset variables. Passwords skip them when MONGO_REQUIRE_PASSWORDS is on.
DEFAULTS = {
    'MONGO_INITDB_DATABASE': 'myapp',
    'MONGO_APP_USERNAME': 'appuser',
    'MONGO_APP_PASSWORD': 'AppSecurePassword123!',
    'MONGO_MONITOR_USERNAME': 'monitor',
    'MONGO_MONITOR_PASSWORD': 'MonitorSecurePassword123!',
    'MONGO_BACKUP_USERNAME': 'backup',
    'MONGO_BACKUP_PASSWORD': 'BackupSecurePassword123!',
}

TRUTHY = {'1', 'true', 'yes', 'on'}


@dataclass
class Settings:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    replica_set: str = DEFAULT_REPLICA_SET
    members: list = field(default_factory=lambda: [f'{DEFAULT_HOST}:{DEFAULT_PORT}'])
    wait_attempts: int = DEFAULT_WAIT_ATTEMPTS
    wait_interval_ms: int = DEFAULT_WAIT_INTERVAL_MS

    app_db: str = DEFAULTS['MONGO_INITDB_DATABASE']
    app_username: str = DEFAULTS['MONGO_APP_USERNAME']
    app_password: str = None
    monitor_username: str = DEFAULTS['MONGO_MONITOR_USERNAME']
    monitor_password: str = None
    admin_username: str = None
    admin_password: str = None
    backup_username: str = DEFAULTS['MONGO_BACKUP_USERNAME']
    backup_password: str = None

    root_username: str = None
    root_password: str = None

    @property
    def uri(self):
        return f"mongodb://{self.host}:{self.port}/admin?directConnection=true"

    @property
    def credentials(self):
        if self.root_username and self.root_password:
            return {'username': self.root_username, 'password': self.root_password}
        return {}

    @property
    def replica_set_config(self):
        return {
            '_id': self.replica_set,
            'members': [{'_id': i, 'host': h} for i, h in enumerate(self.members)],
        }


def load_config(config_file):
    """Read the optional YAML connection file. A missing file yields an empty mapping."""
    path = Path(config_file)
    if not path.exists():
        return {}
    try:
        with path.open() as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Cannot parse {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping, got {type(data).__name__}")
    return data


def _get(environ, name, default=None):
    value = environ.get(name)
    if value is None or value == '':
        return default
    return value


def _get_int(environ, name, default):
    value = _get(environ, name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from None


def load_settings(environ=None, config_file=None):
    """Build Settings from the YAML file and the environment; the environment wins."""
    if environ is None:
        environ = os.environ
    if config_file is None:
        config_file = _get(environ, 'MONGO_INIT_CONFIG', CONFIG_FILE)
    cfg = load_config(config_file)

    rs_cfg = cfg.get('replica_set') or {}
    host = _get(environ, 'MONGO_HOST', cfg.get('host', DEFAULT_HOST))
    port = _get_int(environ, 'MONGO_PORT', int(cfg.get('port', DEFAULT_PORT)))
    members = rs_cfg.get('members') or [f'{DEFAULT_HOST}:{DEFAULT_PORT}']

    require_passwords = _get(environ, 'MONGO_REQUIRE_PASSWORDS', '').lower() in TRUTHY

    def password(name):
        return _get(environ, name, None if require_passwords else DEFAULTS[name])

    return Settings(
        host=host,
        port=port,
        replica_set=_get(environ, 'MONGO_REPLICA_SET', rs_cfg.get('name', DEFAULT_REPLICA_SET)),
        members=[str(m) for m in members],
        wait_attempts=_get_int(environ, 'MONGO_RS_WAIT_ATTEMPTS', DEFAULT_WAIT_ATTEMPTS),
        wait_interval_ms=_get_int(environ, 'MONGO_RS_WAIT_INTERVAL_MS', DEFAULT_WAIT_INTERVAL_MS),
        app_db=_get(environ, 'MONGO_INITDB_DATABASE', DEFAULTS['MONGO_INITDB_DATABASE']),
        app_username=_get(environ, 'MONGO_APP_USERNAME', DEFAULTS['MONGO_APP_USERNAME']),
        app_password=password('MONGO_APP_PASSWORD'),
        monitor_username=_get(environ, 'MONGO_MONITOR_USERNAME', DEFAULTS['MONGO_MONITOR_USERNAME']),
        monitor_password=password('MONGO_MONITOR_PASSWORD'),
        admin_username=_get(environ, 'MONGO_ADMIN_USERNAME'),
        admin_password=_get(environ, 'MONGO_ADMIN_PASSWORD'),
        backup_username=_get(environ, 'MONGO_BACKUP_USERNAME', DEFAULTS['MONGO_BACKUP_USERNAME']),
        backup_password=password('MONGO_BACKUP_PASSWORD'),
        root_username=_get(environ, 'MONGO_INITDB_ROOT_USERNAME'),
        root_password=_get(environ, 'MONGO_INITDB_ROOT_PASSWORD'),
    )
