from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    debug: bool = True
    log_level: str = "INFO"

    # Parser ceilings. The combined ceiling bounds count * size per term.
    max_dice: int = 1000
    max_die_size: int = 10000
    max_dice_combination: int = 100000

    # Bonus dice allowed in a single exploding chain before the roll is aborted.
    max_explosion_chain: int = 1000

    # Monte-Carlo simulation bounds for the statistics endpoint.
    statistics_default_iterations: int = 10000
    statistics_max_iterations: int = 100000
    # Upper bound on iterations * dice per term summed over the expression.
    statistics_max_dice_rolled: int = 5000000

    # "crypto" draws from the OS entropy pool; "math" uses a (optionally seeded) PRNG.
    random_source: Literal["crypto", "math"] = "crypto"
    random_seed: int | None = None


settings = Settings()
