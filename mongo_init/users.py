from dataclasses import dataclass, field

from pymongo.errors import PyMongoError

from .errors import MissingCredential, ProvisioningError, user_already_exists

ADMIN_DB = 'admin'


@dataclass(frozen=True)
class Role:
    role: str
    db: str

    def as_dict(self):
        return {'role': self.role, 'db': self.db}


@dataclass
class Account:
    name: str
    database: str
    username: str
    password: str = field(repr=False)
    roles: list
    password_variable: str = None

    def role_dicts(self):
        return [r.as_dict() for r in self.roles]

    def describe(self):
        roles = ', '.join(r.role for r in self.roles)
        return f"{self.username}@{self.database} [{roles}]"


def should_create_admin(settings):
    return bool(settings.admin_username) and settings.admin_username != settings.root_username


def build_accounts(settings):
    """Accounts to provision, in creation order.

    The admin account is only included when an admin username is configured
    and it is not the root user.
    """
    app_db = settings.app_db
    accounts = [
        Account('application', app_db, settings.app_username, settings.app_password,
                [Role('readWrite', app_db)], 'MONGO_APP_PASSWORD'),
        Account('monitor', app_db, settings.monitor_username, settings.monitor_password,
                [Role('read', app_db)], 'MONGO_MONITOR_PASSWORD'),
    ]
    if should_create_admin(settings):
        accounts.append(
            Account('admin', ADMIN_DB, settings.admin_username, settings.admin_password,
                    [Role('userAdminAnyDatabase', ADMIN_DB),
                     Role('readWriteAnyDatabase', ADMIN_DB),
                     Role('dbAdminAnyDatabase', ADMIN_DB),
                     Role('clusterAdmin', ADMIN_DB)],
                    'MONGO_ADMIN_PASSWORD'))
    accounts.append(
        Account('backup', ADMIN_DB, settings.backup_username, settings.backup_password,
                [Role('backup', ADMIN_DB), Role('readAnyDatabase', ADMIN_DB)],
                'MONGO_BACKUP_PASSWORD'))
    return accounts


def check_credentials(accounts):
    for account in accounts:
        if not account.password:
            raise MissingCredential(account.password_variable, account.name)


def create_user(client, account):
    """createUser, or updateUser when the account is already there.

    Returns 'created' or 'updated'.
    """
    db = client[account.database]
    try:
        db.command('createUser', account.username,
                   pwd=account.password,
                   roles=account.role_dicts())
        print(f"Created user {account.describe()}")
        return 'created'
    except PyMongoError as e:
        if not user_already_exists(e):
            raise ProvisioningError(account.username, e) from e
    try:
        db.command('updateUser', account.username,
                   pwd=account.password,
                   roles=account.role_dicts())
    except PyMongoError as e:
        raise ProvisioningError(account.username, e) from e
    print(f"User {account.username}@{account.database} already exists; updated password and roles")
    return 'updated'


def provision(client, accounts):
    """Create accounts in order. Callers run check_credentials first."""
    results = {}
    for account in accounts:
        results[account.name] = create_user(client, account)
        if account.name == 'admin' and results['admin'] == 'created':
            print('Admin user created')
    return results
