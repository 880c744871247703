import glob
import os
import re
import shutil

import pandas as pd

from tracegen.action import HEADER, Action

DELIMITER = ";"

# <broker>-<machine>_<client>, broker names may hold '-' and '_' themselves
TRACE_FILE = re.compile(r"^(?P<broker>.+)-(?P<machine>\d+)_(?P<client>(?:Pub_|Sub_)?c\d+)$")


def prepare_dir(directory):
    """make sure the directory exists and holds nothing from an earlier run"""
    if os.path.exists(directory):
        print(f"Deleting old content of {directory}")
        shutil.rmtree(directory)
    os.makedirs(directory, exist_ok=True)


def trace_file_name(broker_name, machine, client_name):
    return f"{broker_name}-{machine}_{client_name}.csv"


def parse_trace_file_name(path):
    """(broker, machine, client) of a trace file written by CsvActionSink"""
    stem = os.path.splitext(os.path.basename(path))[0]
    match = TRACE_FILE.match(stem)
    if match is None:
        raise ValueError(f"{path} is not named like a trace file")
    return match.group("broker"), int(match.group("machine")), match.group("client")


def write_trace(path, actions):
    df = pd.DataFrame([a.to_row() for a in actions], columns=HEADER)
    df.to_csv(path, sep=DELIMITER, index=False)


def read_trace(path):
    df = pd.read_csv(path, sep=DELIMITER, dtype=str, keep_default_na=False)
    if list(df.columns) != HEADER:
        raise ValueError(f"{path} does not start with the trace header")
    return [Action.from_row(row) for row in df.values.tolist()]


class CsvActionSink:
    """
    Stores every client trace as its own CSV file, named after its broker,
    workload machine and client.
    """

    def __init__(self, directory):
        self.directory = directory
        self.files = []

    def prepare(self):
        prepare_dir(self.directory)
        return self

    def write(self, broker_name, machine, client_name, actions):
        if not os.path.isdir(self.directory):
            raise RuntimeError(f"Output directory {self.directory} does not exist, call prepare() first")
        path = os.path.join(self.directory, trace_file_name(broker_name, machine, client_name))
        write_trace(path, actions)
        self.files.append(path)
        return path


def load_traces(directory):
    """
    All traces of a directory as one DataFrame with broker, machine and
    client columns taken from the file names.
    """
    frames = []
    for path in sorted(glob.glob(os.path.join(directory, "*.csv"))):
        broker, machine, client = parse_trace_file_name(path)
        df = pd.read_csv(path, sep=DELIMITER, keep_default_na=False, dtype={"topic": str, "geofence": str})
        df["broker"] = broker
        df["machine"] = machine
        df["client"] = client
        frames.append(df)
    if not frames:
        return pd.DataFrame(columns=HEADER + ["broker", "machine", "client"])
    return pd.concat(frames, ignore_index=True)
