"""
DC motor board demo.

Scans the bus for boards, connects to the configured address and ramps
both motors from 10% to 100% duty cycle, printing the encoder speeds:
- M1 clockwise, M2 counter-clockwise
- PWM 3000 Hz, encoders enabled, reduction ratio 49

Usage:
    python tools/motor_demo.py [address]

⚠️  WARNING: Motors will spin during the demo!

Requirements:
    - pigpiod daemon running
    - I2C enabled, board wired to the configured bus
"""

import sys
import os
import time
import signal

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from dfmotor.hardware import (
    DCMotorController,
    DCMotorError,
    Direction,
    MotorChannel,
    detect_boards,
)
from dfmotor.hardware.factory import build_bus
from dfmotor.utils.logger import setup_logging_from_settings
from dfmotor.utils.settings import load_settings


class MotorDemo:
    """Interactive ramp demo."""

    def __init__(self, address=None):
        self.settings = load_settings()
        self.address = address if address is not None else self.settings['board']['address']
        self.bus = None
        self.board = None
        self.running = False

        signal.signal(signal.SIGINT, self._signal_handler)

    def _signal_handler(self, sig, frame):
        """Stop motors on Ctrl+C."""
        print("\n\n🛑 Stopping motors!")
        self.running = False
        if self.board:
            self.board.motor_stop(MotorChannel.M1)
            self.board.motor_stop(MotorChannel.M2)

    def _print_speeds(self, duty):
        for channel in MotorChannel:
            reading = self.board.get_encoder_speed(channel)
            speed = reading.value if reading else f"read failed ({reading.error})"
            print(f"   M{channel} duty: {duty:5.1f}%  encoder speed: {speed}")

    def ramp(self):
        print("\n" + "=" * 70)
        print("RAMP 10% → 100%")
        print("=" * 70)

        duty = 10.0
        while self.running and duty <= 100.0:
            self.board.motor_movement(MotorChannel.M1, Direction.CW, duty)
            self.board.motor_movement(MotorChannel.M2, Direction.CCW, duty)
            time.sleep(2.0)
            self._print_speeds(duty)
            duty += 10.0

    def run(self):
        print("=" * 70)
        print("DC MOTOR BOARD DEMO")
        print("=" * 70)

        self.bus = build_bus(self.settings)
        boards = detect_boards(self.bus)
        print(f"\nBoard addresses: {[f'0x{a:02X}' for a in boards]}")

        print()
        print("⚠️  WARNING: Motors will spin during this demo!")
        input("Press ENTER to continue or Ctrl+C to abort...")

        try:
            self.board = DCMotorController(self.bus, self.address)
        except DCMotorError as e:
            print(f"❌ Cannot connect to board 0x{self.address:02X}: {e}")
            self.bus.stop()
            return

        print(f"✅ {self.board}")
        self.running = True

        try:
            self.board.set_motor_pwm_frequency(3000)
            for channel in MotorChannel:
                self.board.set_encoder_enable(channel)
                self.board.set_encoder_reduction_ratio(channel, 49)
            self.ramp()
        finally:
            print("\nCleaning up...")
            self.board.close()
            self.bus.stop()
            print("✅ Demo completed")


def main():
    """Main entry point."""
    setup_logging_from_settings()
    address = int(sys.argv[1], 0) if len(sys.argv) > 1 else None
    MotorDemo(address).run()


if __name__ == "__main__":
    main()
