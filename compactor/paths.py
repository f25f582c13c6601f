import random
import string
from datetime import datetime, timezone


OUTPUT_PREFIX = "claude-compactor"
SUFFIX_ALPHABET = string.ascii_uppercase + string.digits
SUFFIX_LENGTH = 4


def utc_timestamp(now: datetime | None = None) -> str:
    moment = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    iso = moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"
    return iso.replace(":", "-").replace(".", "-")


def random_suffix(rng: random.Random | None = None) -> str:
    chooser = rng or random.SystemRandom()
    return "".join(chooser.choice(SUFFIX_ALPHABET) for _ in range(SUFFIX_LENGTH))


def generate_output_filename(now: datetime | None = None, rng: random.Random | None = None) -> str:
    return f"{OUTPUT_PREFIX}-{utc_timestamp(now)}-{random_suffix(rng)}.txt"
