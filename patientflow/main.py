import argparse

from .arrivals import PatientGenerator
from .config import ARRIVAL_INTERVAL, DEFAULT_TICK_DELAY, PROB_PRI1, PROB_PRI2
from .hospital import HospitalSimulation
from .logging_config import configure_from_env, enable_console_logging


def build_parser():
    parser = argparse.ArgumentParser(description="Hospital patient flow simulation")
    parser.add_argument("--ticks", type=int, default=1000, help="Number of ticks to simulate (default: 1000)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for the patient generator")
    queue = parser.add_mutually_exclusive_group()
    queue.add_argument("--fifo", dest="priority", action="store_false", help="Arrival-order waiting queues")
    queue.add_argument("--priority", dest="priority", action="store_true", help="Priority-ordered waiting queues (default)")
    parser.set_defaults(priority=True)
    parser.add_argument("--delay", type=float, default=DEFAULT_TICK_DELAY, help="Seconds between ticks (default: 0)")
    parser.add_argument("--arrival-interval", type=int, default=ARRIVAL_INTERVAL, help="Average ticks between arrivals")
    parser.add_argument("--prob-pri1", type=int, default=PROB_PRI1, help="Percent of priority 1 patients")
    parser.add_argument("--prob-pri2", type=int, default=PROB_PRI2, help="Percent of priority 2 patients")
    parser.add_argument("--quiet", action="store_true", help="Only print the final statistics")
    parser.add_argument("--log-level", default=None, help="Enable console logging at this level")
    return parser


def run(args):
    if args.log_level:
        enable_console_logging(level=args.log_level)
    else:
        configure_from_env()

    generator = PatientGenerator(
        arrival_interval=args.arrival_interval,
        prob_pri1=args.prob_pri1,
        prob_pri2=args.prob_pri2,
        seed=args.seed,
    )

    print("=== Hospital Patient Flow Simulation ===")
    print(f"Queues: {'priority' if args.priority else 'FIFO'} | Ticks: {args.ticks}")

    sim = HospitalSimulation(arrival_source=generator, use_priority_queues=args.priority, delay=args.delay)
    if args.quiet:
        sim.sink = lambda line: None
        sim.start(max_ticks=args.ticks)
        for line in sim.statistics_report():
            print(line)
    else:
        sim.start(max_ticks=args.ticks)
    return sim


def main(argv=None):
    run(build_parser().parse_args(argv))


if __name__ == "__main__":
    main()
