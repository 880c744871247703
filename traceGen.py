#!/usr/bin/env python3
""" Generate ping/subscribe/publish traces of simulated clients for a geo-distributed pub/sub broker.
	Usage: python3 traceGen.py [scenario] [--from-file <file.yaml>] [--workers N] [--plot]
"""
import os
import sys
import argparse

from tracegen import generator, geofence, mobility, timeline
from tracegen.config import ConfigurationError, load_config
from tracegen.geofence import broker_areas_from_config
from tracegen.report import append_summary, sim_report, write_setup
from tracegen.scenarios import SCENARIOS
from tracegen.sink import CsvActionSink, load_traces


def parse_params(args):
	parser = argparse.ArgumentParser(prog='traceGen', description='Geo-distributed pub/sub workload trace generator')
	parser.add_argument('scenario', nargs='?', default='hiking', choices=sorted(SCENARIOS),
						help='built-in scenario (default: hiking)')
	parser.add_argument('--from-file', type=str, default=None,
						help='YAML scenario file, its SCENARIO key picks the built-in base')
	parser.add_argument('--out', type=str, default=None, help='output directory (default: OUT_DIR of the scenario)')
	parser.add_argument('--seed', type=int, default=None, help='random seed')
	parser.add_argument('--workers', type=int, default=1, help='number of worker processes (default: 1)')
	parser.add_argument('--plot', action='store_true', help='plot broker areas and client paths')
	parser.add_argument('--verbose', action='store_true', help='print per client details')
	return parser.parse_args(args)


def main(args):
	params = parse_params(args)
	try:
		if params.from_file is not None:
			conf = load_config(params.from_file)
		else:
			conf = SCENARIOS[params.scenario]()
		if params.seed is not None:
			conf.SEED = params.seed
		if params.out is not None:
			conf.OUT_DIR = params.out
		conf.PLOT = conf.PLOT or params.plot
		conf.VERBOSE = conf.VERBOSE or params.verbose
		conf.validate()
		geofence.validate_broker_areas(broker_areas_from_config(conf.BROKERS))
	except (ConfigurationError, OSError) as e:
		print(f"Invalid configuration: {e}")
		exit(1)

	generator.VERBOSE = timeline.VERBOSE = mobility.VERBOSE = geofence.VERBOSE = conf.VERBOSE

	print("Scenario:", conf.NAME)
	print("Number of clients:", conf.total_clients())
	print("Brokers:", ", ".join(b["name"] for b in conf.BROKERS))
	print("Runtime per client (s):", conf.RUNTIME/1000)
	print("Topics:", ", ".join(conf.TOPICS))

	directory = os.path.join(conf.OUT_DIR, conf.NAME)
	sink = CsvActionSink(directory).prepare()
	write_setup(conf, directory)

	print("\n====== START OF GENERATION ======")
	stats, _ = generator.generate(conf, sink, workers=params.workers)
	print("\n====== END OF GENERATION ======")

	output = stats.render_summary(conf.total_clients(), conf.RUNTIME)
	print(output)
	append_summary(output, directory)
	sim_report(conf, stats.summary(conf.total_clients(), conf.RUNTIME), directory)
	print(f"Traces saved to {directory}")

	if conf.PLOT:
		from tracegen.plot import plot_traces
		plot_traces(conf, broker_areas_from_config(conf.BROKERS), load_traces(directory), directory)


if __name__ == "__main__":
	main(sys.argv[1:])
