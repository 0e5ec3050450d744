import time

from pymongo.errors import OperationFailure, PyMongoError

from .errors import ReplicaSetTimeout, is_already_initialized


def initiate(client, rs_config):
    """Send replSetInitiate. Failures are reported and never raised.

    Returns True when this call initiated the set.
    """
    try:
        client.admin.command('replSetInitiate', rs_config)
        print('Replica set initialized')
        return True
    except PyMongoError as e:
        if is_already_initialized(e):
            print('Replica set already initialized')
        else:
            print(f"Replica set already initialized or error: {e}")
        return False


def is_ready(client):
    try:
        status = client.admin.command('replSetGetStatus')
    except OperationFailure:
        # NotYetInitialized and friends while the set is still electing
        return False
    return status.get('ok') == 1


def wait_until_ready(client, attempts, interval_ms, sleep=time.sleep):
    """Poll replSetGetStatus until ok == 1, at most `attempts` times."""
    for attempt in range(1, attempts + 1):
        try:
            if is_ready(client):
                print(f"Replica set ready after {attempt} attempt(s).")
                return attempt
        except PyMongoError as e:
            print(f"Replica set status unavailable (attempt {attempt}): {e}")
        if attempt == attempts:
            break
        print('Waiting for replica set to be ready...')
        sleep(interval_ms / 1000.0)
    raise ReplicaSetTimeout(attempts)
