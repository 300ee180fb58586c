import sys
import json
import logging
import logging.handlers
import argparse
from pathlib import Path
from typing import Iterable, Optional, Tuple

from src.core.config import load_config
from src.core.normalizer import LineNormalizer
from src.core.parser import WeechatLineParser
from src.core.sink import RecordingSink
from src.core.tailer import WeechatLogTailer
from src.services.nick_stats import NickStatsSink

# Setup Logging
def setup_logging(level: str = 'INFO', log_dir: Optional[str] = None):
    logger = logging.getLogger()
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        log_file = log_path / "weechat_stats.log"

        # File Handler (Rotating)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=1024*1024, backupCount=5, encoding='utf-8'
        )
        file_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

    # Console Handler
    console_handler = logging.StreamHandler()
    console_formatter = logging.Formatter('%(levelname)s: %(message)s')
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    logging.info(f"Logging initialized. Log dir: {log_dir or '(console only)'}")

logger = logging.getLogger(__name__)


class LogProcessor:
    """
    Feeds numbered log lines through the normalizer and the parser.
    The parser's sink receives the events.
    """
    def __init__(self, parser: WeechatLineParser, normalizer: Optional[LineNormalizer] = None):
        self.parser = parser
        self.normalizer = normalizer

    def process_lines(self, lines: Iterable[Tuple[int, str]]) -> int:
        """Process a batch of (line_number, text) pairs. Returns lines handled."""
        processed = 0
        for line_number, line in lines:
            try:
                self._process_single_line(line_number, line)
                processed += 1
            except Exception:
                logger.exception(f"Error processing line {line_number}")
        return processed

    def _process_single_line(self, line_number: int, line: str):
        if self.normalizer:
            line = self.normalizer.normalize(line)
        self.parser.parse_line(line, line_number)


def build_arg_parser() -> argparse.ArgumentParser:
    arg_parser = argparse.ArgumentParser(
        prog='weechat-stats',
        description='Parse a WeeChat channel log and report per-nick activity.'
    )
    arg_parser.add_argument('logfile', help='WeeChat log file to parse')
    arg_parser.add_argument('--config', help='YAML settings file')
    arg_parser.add_argument('--debug', action='store_true', help='Log skipped lines')
    arg_parser.add_argument('--dump', action='store_true',
                            help='Print every event as a JSON line instead of a report')
    arg_parser.add_argument('--top', type=int, help='Number of nicks in the report')
    return arg_parser


def print_report(stats: NickStatsSink, top: int):
    print(f"{'Nick':<20} {'Lines':>7} {'Actions':>8} {'Joins':>6} {'Kicks':>6}")
    print("-" * 50)
    for nick, count in stats.top(top, 'lines'):
        c = stats.counts[nick.lower()]
        print(f"{nick:<20} {count:>7} {c['actions']:>8} {c['joins']:>6} {c['kicks_given']:>6}")

    slappers = stats.top(3, 'slaps_given')
    if slappers:
        print("\nMost violent: " + ", ".join(f"{n} ({c})" for n, c in slappers))

    if stats.last_topic:
        time, nick, topic = stats.last_topic
        print(f"\nLatest topic (set by {nick} at {time}): {topic}")

    print(f"\nSkipped lines: {stats.skipped_lines}")


def main(argv=None) -> int:
    args = build_arg_parser().parse_args(argv)
    config = load_config(args.config)

    setup_logging('DEBUG' if args.debug else config['log_level'], config.get('log_dir'))

    log_path = Path(args.logfile)
    if not log_path.exists():
        logger.error(f"Log file not found: {log_path}")
        return 1

    sink = RecordingSink() if args.dump else NickStatsSink()
    parser = WeechatLineParser(sink)
    normalizer = LineNormalizer() if config.get('normalize', True) else None
    processor = LogProcessor(parser, normalizer)

    tailer = WeechatLogTailer(str(log_path), encoding=config.get('encoding', 'utf-8'))
    try:
        lines = tailer.read_all_lines()
    finally:
        tailer.close()

    processed = processor.process_lines(lines)
    logger.info(f"Processed {processed} of {len(lines)} lines from {log_path.name}")

    if args.dump:
        for event in sink.events:
            print(json.dumps(event.to_dict(), ensure_ascii=False))
    else:
        print_report(sink, args.top if args.top is not None else config.get('top_nicks', 10))

    return 0


if __name__ == "__main__":
    sys.exit(main())
