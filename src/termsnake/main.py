# main.py
import argparse
from typing import List, Optional

from .config import Config, TICKS_PER_SEC
from .errors import TermsnakeError
from .game import Controller, new_controller, handle_events, continue_game
from .input import InputSource, InputThread
from .logging_config import configure_logging, logger
from .render import Display, draw, show_endscreen
from .terminal import Terminal, TerminalInput
from .ticker import TickChannel, TickScheduler


def run_game(display: Display, source: InputSource, config: Config,
             ticks_per_sec: int = TICKS_PER_SEC) -> Controller:
    """
    Drive one game until the quit key is pressed. Both background threads are
    stopped and joined before this returns, whatever the exit path.
    """
    ctrl = new_controller(config.seed)
    ticks = TickChannel()
    input_thread = InputThread(source, ctrl.events)
    scheduler = TickScheduler(ticks, ticks_per_sec)

    input_thread.start()
    scheduler.start()
    try:
        for _ in ticks:
            # 1) fail fast if input capture died
            error = input_thread.take_error()
            if error is not None:
                raise error

            # 2) input
            handle_events(ctrl)

            # 3) update + render
            if not ctrl.lost:
                continue_game(ctrl)
                draw(display, ctrl, config)
            else:
                show_endscreen(display, ctrl)

            if ctrl.should_close:
                break
    finally:
        ticks.close()
        scheduler.stop()
        input_thread.stop()
    return ctrl


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="termsnake", description="Snake in your terminal.")
    parser.add_argument("--seed", type=int, default=None,
                        help="seed for apple placement (default: random)")
    parser.add_argument("--debug-events", action="store_true",
                        help="show the last key/mouse event under the board")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    config = Config(seed=args.seed, debug_events=args.debug_events)
    log_file = configure_logging()
    logger.info("Starting termsnake with %s, logging to %s", config, log_file)

    terminal = Terminal()
    try:
        with terminal.session():
            ctrl = run_game(terminal, TerminalInput(terminal.fd), config)
    except TermsnakeError as exc:
        logger.error("%s", exc)
        print(f"termsnake: {exc}")
        return 1

    logger.info("Exited with score %d", ctrl.score)
    print(f"Final score: {ctrl.score}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
