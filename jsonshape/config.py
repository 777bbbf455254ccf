"""jsonshape defaults (overridable per decoder/encoder instance)"""
import os

CODEC_CONFIG = {
    "max_depth": int(os.environ.get("JSONSHAPE_MAX_DEPTH", "512")),   # nesting guard for decode
    "pretty": os.environ.get("JSONSHAPE_PRETTY", "false").lower() == "true",  # indent encoded text
}
