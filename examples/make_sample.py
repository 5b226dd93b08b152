"""Write a synthetic flight computer dump for the Xenia-2 config.

    python3 examples/make_sample.py data.bin
    flightdata convert -c examples/xenia2_config.json data.bin data.csv

The accelerometer reports three times for every barometer reading, which
produces sparse rows in the converted table.
"""

import math
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "python"))

from flightdata.config import load_config
from flightdata.decoder import encode_packet

CONFIG = os.path.join(os.path.dirname(__file__), "xenia2_config.json")


def main():
    path = sys.argv[1] if len(sys.argv) > 1 else "data.bin"
    config = load_config(CONFIG)

    with open(path, "wb") as f:
        for i in range(300):
            t = i * 0.01
            f.write(encode_packet(config, 0, [
                int(1000 * math.sin(t)), int(1000 * math.cos(t)), -981,
            ]))
            f.write(encode_packet(config, 1, [
                math.sin(t), math.cos(t), 9.81,
            ]))
            if i % 3 == 0:
                f.write(encode_packet(config, 2, [
                    101325.0 - 12.0 * i, 15.0 - 0.0065 * i,
                ]))

    print(f"wrote {os.path.getsize(path):,} bytes to {path}")


if __name__ == "__main__":
    main()
