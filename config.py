"""
Configuration du moongraph alert bot
"""

import os
import json
import logging
from typing import Dict, Any, Optional

from dotenv import load_dotenv

from errors import ConfigError

logger = logging.getLogger("config")

# Configuration par défaut
DEFAULT_CONFIG = {
    # Telegram
    "TELEGRAM_BOT_TOKEN": "",
    "TELEGRAM_CHAT_ID": "-1002511600127",

    # HTTP
    "WEBHOOK_URL": "",
    "PORT": 10000,

    # Helius + RPC
    "HELIUS_API_KEY": "",
    "HELIUS_API_BASE": "https://api.helius.xyz",
    "RPC_HTTP_ENDPOINT": "",
    "COMMITMENT": "confirmed",
    "PUMP_FUN_PROGRAM": "6EF8rrecthR5Dkzon8Nwu78hRvfCKubJ14M5uBEwF6P",

    # Pipeline
    "BYPASS_FILTERS": False,
    "ALERT_RATE_CAP": 5,
    "RATE_WINDOW_SECONDS": 60,
    "MAX_FETCH_ATTEMPTS": 3,
    "RETRY_BASE_DELAY_SECONDS": 1.0,
    "NOTICE_DELAY_SECONDS": 2.0,

    # Scan & Timing
    "SCAN_INTERVAL_SECONDS": 10,
    "SCAN_LIMIT": 5,

    # Trading
    "AUTO_SNIPE": False,
    "AUTO_SNIPE_AMOUNT_SOL": 0.1,
    "PRIVATE_KEY": "",
}

REQUIRED_KEYS = ("TELEGRAM_BOT_TOKEN", "WEBHOOK_URL", "HELIUS_API_KEY")


def load_config(config_file: Optional[str] = None) -> Dict[str, Any]:
    """
    Charge la configuration depuis les variables d'environnement (et .env),
    puis applique le fichier JSON optionnel par-dessus.

    Args:
        config_file: chemin d'un fichier JSON de surcharge (ou CONFIG_FILE)

    Returns:
        Dictionnaire de configuration
    """
    load_dotenv()
    config = load_config_from_env()

    config_file = config_file or os.environ.get("CONFIG_FILE")
    if config_file:
        if not os.path.exists(config_file):
            logger.warning(f"Fichier de configuration introuvable: {config_file}")
        else:
            try:
                with open(config_file, "r") as f:
                    overrides = json.load(f)
                config.update(overrides)
                logger.info(f"Configuration chargée depuis: {config_file}")
            except Exception as e:
                logger.error(f"Erreur lors du chargement de la configuration: {e}")

    if not config.get("RPC_HTTP_ENDPOINT") and config.get("HELIUS_API_KEY"):
        config["RPC_HTTP_ENDPOINT"] = f"https://mainnet.helius-rpc.com/?api-key={config['HELIUS_API_KEY']}"

    return config


def load_config_from_env() -> Dict[str, Any]:
    """
    Charge la configuration depuis les variables d'environnement

    Returns:
        Dictionnaire de configuration
    """
    config = {}

    for key, default_value in DEFAULT_CONFIG.items():
        env_value = os.environ.get(key)

        if env_value is not None:
            try:
                if isinstance(default_value, bool):
                    config[key] = env_value.lower() == "true"
                elif isinstance(default_value, int):
                    config[key] = int(env_value)
                elif isinstance(default_value, float):
                    config[key] = float(env_value)
                else:
                    config[key] = env_value
            except Exception as parse_err:
                logger.warning(f"Impossible de parser la variable d'env {key}: {parse_err}. Valeur par défaut utilisée.")
                config[key] = default_value
        else:
            config[key] = default_value

    return config


def validate_config(config: Dict[str, Any]) -> None:
    """
    Vérifie que les clés obligatoires sont présentes

    Raises:
        ConfigError: si une clé obligatoire manque
    """
    required = list(REQUIRED_KEYS)
    if config.get("AUTO_SNIPE"):
        required.append("PRIVATE_KEY")

    missing = [key for key in required if not config.get(key)]
    if missing:
        raise ConfigError(f"Missing environment variables. Required: {', '.join(missing)}")
