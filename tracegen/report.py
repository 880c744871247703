import os

import pandas as pd
import yaml

from tracegen.config import dump_config


def setup_string(conf):
    return "Setup:\n" + yaml.dump(conf.to_dict(), sort_keys=False, default_flow_style=None, indent=4)


def sim_report(conf, summary, directory):
    """one row csv with the summary of a run, for comparing runs in a spreadsheet"""
    os.makedirs(os.path.join(directory, "report"), exist_ok=True)
    fname = f"summary_{conf.NAME}.csv"
    row = dict(summary)
    row["scenario"] = conf.NAME
    row["seed"] = conf.SEED
    df_new = pd.DataFrame([row])
    path = os.path.join(directory, "report", fname)
    df_new.to_csv(path, index=False)
    return path


def write_setup(conf, directory):
    dump_config(conf, os.path.join(directory, "00_setup.yaml"))
    path = os.path.join(directory, "00_summary.txt")
    with open(path, 'w') as file:
        file.write(setup_string(conf))
    return path


def append_summary(text, directory):
    path = os.path.join(directory, "00_summary.txt")
    with open(path, 'a') as file:
        file.write("\n" + text)
    return path
