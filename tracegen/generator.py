import functools
import operator
import random
import time
from concurrent.futures import ProcessPoolExecutor
from itertools import repeat

from tracegen.config import ROLES
from tracegen.geofence import broker_areas_from_config, validate_broker_areas
from tracegen.stats import Stats
from tracegen.timeline import ActionTimeline

VERBOSE = False

# file name prefix of the client name per role
ROLE_PREFIX = {
    "client": "",
    "publisher": "Pub_",
    "subscriber": "Sub_",
}


def verboseprint(*args, **kwargs):
    if VERBOSE:
        print(*args, **kwargs)


def client_name(client_index, role="client"):
    return f"{ROLE_PREFIX[role]}c{client_index:05d}"


def client_rng(conf, broker_name, name):
    """every client has its own stream, so results do not depend on the worker count"""
    return random.Random(f"{conf.SEED}-{broker_name}-{name}")


def workload_machine(client_index, machines):
    """spread the clients of a role evenly over the workload machines of their broker"""
    return client_index % machines


def run_client(conf, broker_index, role, client_index):
    """
    Generate the trace of a single client. Runs in a worker process, so
    it only touches its own Stats.
    """
    areas = broker_areas_from_config(conf.BROKERS)
    broker = areas[broker_index]
    stats = Stats()
    name = client_name(client_index, role)
    timeline = ActionTimeline(conf, broker, areas, stats, client_rng(conf, broker.name, name), name, role)
    actions = timeline.generate()
    return broker_index, role, client_index, actions, stats


def generate(conf, sink=None, workers=1):
    """
    Generate the traces of every client of every broker.

    Each finished trace is handed to the sink (if any), otherwise it is
    kept in the returned dict under (broker name, client name). Returns the
    run Stats, reduced from the per-client partials, and that dict.
    """
    conf.validate()
    areas = broker_areas_from_config(conf.BROKERS)
    validate_broker_areas(areas)

    broker_indices = []
    roles = []
    client_indices = []
    for b, area in enumerate(areas):
        for role in ROLES:
            n = area.count(role)
            broker_indices.extend([b] * n)
            roles.extend([role] * n)
            client_indices.extend(range(n))

    start = time.time()
    partials = []
    traces = {}
    if workers > 1:
        executor = ProcessPoolExecutor(max_workers=workers)
        chunksize = max(1, len(broker_indices) // (workers * 4))
        results = executor.map(run_client, repeat(conf), broker_indices, roles, client_indices, chunksize=chunksize)
    else:
        executor = None
        results = map(run_client, repeat(conf), broker_indices, roles, client_indices)

    try:
        current_broker = None
        done = 0
        for broker_index, role, client_index, actions, stats in results:
            area = areas[broker_index]
            total = sum(area.count(r) for r in ROLES)
            if broker_index != current_broker:
                current_broker = broker_index
                done = 0
                print(f"Calculating actions for broker {area.name}")
            done += 1
            if (100.0 * done / total) % 5.0 == 0.0:
                verboseprint(f"Finished {100 * done // total}% of broker {area.name}")

            name = client_name(client_index, role)
            if sink is not None:
                sink.write(area.name, workload_machine(client_index, area.machines), name, actions)
            else:
                traces[(area.name, name)] = actions
            partials.append(stats)
    finally:
        if executor is not None:
            executor.shutdown()

    total = functools.reduce(operator.add, partials, Stats())
    print(f"Generated {len(partials)} client traces in {time.time() - start:.1f}s")
    return total, traces
