"""Pygame window, keyboard and tone for running a ROM interactively."""

import os
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import numpy as np
import pygame

from cupax.config import RunConfig
from cupax.emulator import run_frame, set_keys, display_mode, sound_active, TimerClock
from cupax.logging import MachineLogger
from cupax.rendering import render_state
from cupax.state import EmulatorState

# 1234/QWER/ASDF/ZXCV -> 123C/456D/789E/A0BF
KEY_MAP = {
    pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3, pygame.K_4: 0xC,
    pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_r: 0xD,
    pygame.K_a: 0x7, pygame.K_s: 0x8, pygame.K_d: 0x9, pygame.K_f: 0xE,
    pygame.K_z: 0xA, pygame.K_x: 0x0, pygame.K_c: 0xB, pygame.K_v: 0xF,
}


def build_tone(frequency: int, volume: float) -> pygame.mixer.Sound:
    """One period of a square wave, looped while the sound timer runs."""
    sample_rate, _, channels = pygame.mixer.get_init()
    period = max(2, int(round(sample_rate / frequency)))
    amplitude = int(32767 * volume)
    wave = np.where(np.arange(period) < period // 2, amplitude, -amplitude).astype(np.int16)
    if channels > 1:
        wave = np.repeat(wave[:, None], channels, axis=1)
    return pygame.sndarray.make_sound(wave)


class Window:
    """Pygame surface that follows the VM display mode."""

    def __init__(self, state: EmulatorState, scale: int):
        self.scale = scale
        self.epoch = int(state.mode_epoch)
        self.screen = None
        self.resize(state)

    def resize(self, state: EmulatorState):
        mode = display_mode(state)
        self.screen = pygame.display.set_mode((mode.width * self.scale, mode.height * self.scale))
        pygame.display.set_caption(f"cupax {mode.width}x{mode.height}")

    def draw(self, state: EmulatorState):
        if int(state.mode_epoch) != self.epoch:
            self.epoch = int(state.mode_epoch)
            self.resize(state)

        # render_state gives (height, width, 3), surfarray wants (width, height, 3)
        frame = render_state(state, scale=1)
        surface = pygame.surfarray.make_surface(np.transpose(frame, (1, 0, 2)))
        self.screen.blit(pygame.transform.scale(surface, self.screen.get_size()), (0, 0))
        pygame.display.flip()


def run_window(state: EmulatorState, config: RunConfig, logger: MachineLogger) -> int:
    """Run the VM in a window until it exits or the window is closed.

    Returns:
        Process exit status
    """
    pygame.mixer.pre_init(44100, -16, 1, 1024)
    pygame.init()

    tone = None
    try:
        tone = build_tone(config.tone_hz, config.volume)
    except pygame.error as e:
        logger.warning(f"Audio disabled: {e}")

    window = Window(state, config.scale)
    clock = pygame.time.Clock()
    timer_clock = TimerClock()

    keypad = [False] * 16
    playing = False
    running = True

    logger.info("Controls: 1234/QWER/ASDF/ZXCV, ESC=Quit")

    try:
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key in KEY_MAP:
                        keypad[KEY_MAP[event.key]] = True
                elif event.type == pygame.KEYUP:
                    if event.key in KEY_MAP:
                        keypad[KEY_MAP[event.key]] = False

            if not running:
                break

            state = set_keys(state, keypad)
            state = run_frame(state, config.cycles_per_frame, timer_clock.due())

            logger.observe(state)
            if bool(state.halted):
                logger.info("Program requested exit")
                break

            if tone is not None:
                gate = sound_active(state)
                if gate and not playing:
                    tone.play(loops=-1)
                elif playing and not gate:
                    tone.stop()
                playing = gate

            window.draw(state)
            clock.tick(config.fps)
    finally:
        pygame.quit()

    return 0
