import time, os, random, sys
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "backend"))

from hydromon.simulation.antares_encode import encode_reading, to_hex  # noqa: E402
from hydromon.simulation.generator import SensorDataGenerator  # noqa: E402

PERIOD = float(os.getenv("PERIOD_SECONDS", "5"))
SEED = os.getenv("SEED")

def main():
    gen = SensorDataGenerator(seed=int(SEED) if SEED else random.randrange(1 << 30))
    while True:
        r = gen.reading_at(datetime.now())
        payload = to_hex(encode_reading(r["temperature"], r["ph"], r["tds_level"]))
        print(payload, r["temperature"], r["ph"], r["tds_level"])
        time.sleep(PERIOD)

if __name__ == "__main__":
    main()
