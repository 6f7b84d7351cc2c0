"""Command line entry point: ``cupax ROM``."""

import argparse
import os
import sys
from typing import List, Optional

import jax
from tqdm import tqdm

from cupax.config import RunConfig
from cupax.emulator import run_cycles, load_rom, RomLoadError
from cupax.logging import MachineLogger
from cupax.state import EmulatorState, create_state


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="cupax", description="Run a CHIP-8 / SCHIP ROM")
    parser.add_argument("rom", help="path to the ROM file")
    parser.add_argument("--scale", type=int, default=10, help="window pixels per VM pixel")
    parser.add_argument("--cpu-hz", type=int, default=500, help="cycles per second")
    parser.add_argument("--seed", type=int, default=0, help="seed for the random opcode")
    parser.add_argument(
        "--headless", type=int, metavar="CYCLES", default=None,
        help="run CYCLES cycles without a window and print the registers",
    )
    parser.add_argument(
        "--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    # Anything else on the command line is ignored
    args, _ = parser.parse_known_args(argv)
    return args


def run_headless(state: EmulatorState, num_cycles: int, config: RunConfig, logger: MachineLogger) -> int:
    """Run a fixed number of cycles, one timer tick per frame worth of cycles."""
    chunk = config.cycles_per_frame
    done = 0
    with tqdm(total=num_cycles, desc="Cycles", unit="cycle", file=sys.stderr) as bar:
        while done < num_cycles:
            n = min(chunk, num_cycles - done)
            state = run_cycles(state, n, chunk)
            done += n
            bar.update(n)
            logger.observe(state)
            if bool(state.halted):
                logger.info("Program requested exit")
                break

    logger.info(f"Ran {done} cycles")
    registers = " ".join(f"V{i:X}={int(v):02X}" for i, v in enumerate(state.V))
    print(registers)
    print(
        f"PC={int(state.pc):03X} I={int(state.I):03X} SP={int(state.stack.pointer)} "
        f"DT={int(state.delay_timer)} ST={int(state.sound_timer)}"
    )
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logger = MachineLogger(log_level=args.log_level)

    try:
        config = RunConfig(scale=args.scale, cpu_hz=args.cpu_hz, seed=args.seed)
    except ValueError as e:
        logger.error(str(e))
        return 2

    if args.headless is not None and args.headless < 0:
        logger.error(f"--headless needs a non-negative cycle count, got {args.headless}")
        return 2

    state = create_state(jax.random.PRNGKey(config.seed))
    try:
        state = load_rom(state, args.rom)
    except RomLoadError as e:
        logger.error(str(e))
        return 1
    logger.log_rom_loaded(args.rom, os.path.getsize(args.rom))

    if args.headless is not None:
        return run_headless(state, args.headless, config, logger)

    from cupax.frontend import run_window
    return run_window(state, config, logger)


if __name__ == "__main__":
    sys.exit(main())
