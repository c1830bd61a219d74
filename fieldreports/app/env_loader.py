"""Environment configuration, loaded before any other app module.

`ENV` selects the environment. In `dev` the settings come from `.env.dev`;
in `staging` and `prod` the hosting platform injects them. Either way the
required settings are checked once at import and the process exits if any
is missing.
"""

import os
import sys
from typing import Literal
from dotenv import load_dotenv

EnvironmentName = Literal["dev", "staging", "prod"]
ENVIRONMENTS: tuple[EnvironmentName, ...] = ("dev", "staging", "prod")

# Settings the service cannot start without.
REQUIRED_ENV_VARS = {
    "DATABASE_URL": "PostgreSQL connection string for the document store",
    "FIREBASE_API_KEY": "Web API key used for Identity Toolkit calls",
    "FIREBASE_PROJECT_ID": "Firebase project whose ID tokens are accepted",
}

DEV_ENV_FILE = ".env.dev"


def get_current_environment() -> EnvironmentName:
    """Get the current environment (dev, staging, or prod)."""
    env = os.getenv("ENV", "dev")
    if env not in ENVIRONMENTS:
        raise ValueError(
            f"Invalid ENV value: {env}. Must be one of {', '.join(ENVIRONMENTS)}."
        )
    return env  # type: ignore[return-value]


def load_environment() -> EnvironmentName:
    """Load `.env.dev` in development; elsewhere rely on injected settings."""
    env = get_current_environment()
    if env == "dev":
        print(f"Loading environment variables from {DEV_ENV_FILE}")
        load_dotenv(DEV_ENV_FILE, verbose=True)
    else:
        print(f"Running in {env} environment (settings injected by the platform)")
    return env


def validate_required_env_vars() -> None:
    """Exit with a readable message if a required setting is missing."""
    missing = [name for name in REQUIRED_ENV_VARS if not os.getenv(name)]
    if not missing:
        return
    print("ERROR: Missing required environment variables:", file=sys.stderr)
    for name in missing:
        print(f"  {name}: {REQUIRED_ENV_VARS[name]}", file=sys.stderr)
    print("Set them in .env.dev or in the deployment environment.", file=sys.stderr)
    sys.exit(1)


load_environment()
validate_required_env_vars()
