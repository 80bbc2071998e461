# config.py
"""
Server configuration settings.
"""

# --- Game Loop & Save ---
TICKER_INTERVAL_SECONDS = 1.0     # How often the host loop runs.
AUTOSAVE_INTERVAL_SECONDS = 300   # 300 seconds = 5 minutes

# --- Files ---
HORDE_CONFIG_FILE = "horde_config.json"  # Created with defaults on first start
LOG_FILE = "server.log"

# --- Demo world ---
# Named (x, z) sites the sample world exposes to persistent spawns.
SAMPLE_SITES = {
    "airfield": (-1200.0, 900.0),
    "harbor": (1500.0, -400.0),
    "oil_rig": (1700.0, 1500.0),
}
