from pymongo.errors import OperationFailure

ALREADY_INITIALIZED = 23
NOT_YET_INITIALIZED = 94
USER_ALREADY_EXISTS = 51003


class BootstrapError(Exception):
    pass


class ConfigError(BootstrapError):
    pass


class MissingCredential(BootstrapError):
    def __init__(self, variable, account):
        super().__init__(f"{variable} is not set; refusing to provision '{account}' without a password")
        self.variable = variable
        self.account = account


class ReplicaSetTimeout(BootstrapError):
    def __init__(self, attempts):
        super().__init__(f"Replica set not ready after {attempts} attempt(s)")
        self.attempts = attempts


class ProvisioningError(BootstrapError):
    def __init__(self, account, cause):
        super().__init__(f"Failed to provision user '{account}': {cause}")
        self.account = account
        self.cause = cause


def is_already_initialized(exc):
    if isinstance(exc, OperationFailure) and exc.code == ALREADY_INITIALIZED:
        return True
    return 'already initialized' in str(exc)


def user_already_exists(exc):
    if not isinstance(exc, OperationFailure):
        return False
    if exc.code == USER_ALREADY_EXISTS:
        return True
    return 'already exists' in str(exc)
