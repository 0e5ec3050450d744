import sys
import time

import pymongo
from pymongo.errors import PyMongoError

from . import replica_set, users
from .errors import BootstrapError
from .settings import load_settings

SERVER_SELECTION_TIMEOUT_MS = 5000


def connect(settings):
    # Credentials go as keywords so reserved URI characters need no escaping.
    return pymongo.MongoClient(settings.uri, serverSelectionTimeoutMS=SERVER_SELECTION_TIMEOUT_MS,
                               **settings.credentials)


def run(client, settings, sleep=time.sleep):
    """Initiate the replica set, wait for it, then provision users."""
    print('Starting MongoDB initialization...')

    accounts = users.build_accounts(settings)
    # Fail before touching the cluster if a password is missing.
    users.check_credentials(accounts)

    replica_set.initiate(client, settings.replica_set_config)
    replica_set.wait_until_ready(client, settings.wait_attempts, settings.wait_interval_ms, sleep=sleep)

    results = users.provision(client, accounts)

    print('MongoDB initialization completed successfully')
    return results


def main():
    try:
        settings = load_settings()
    except BootstrapError as e:
        print(f"Configuration error: {e}")
        sys.exit(1)

    client = None
    try:
        client = connect(settings)
        run(client, settings)
    except (BootstrapError, PyMongoError) as e:
        print(f"MongoDB initialization failed: {e}")
        sys.exit(1)
    finally:
        if client is not None:
            client.close()


if __name__ == '__main__':
    main()
