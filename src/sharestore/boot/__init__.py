from .boot import init_sharestore, __VERSION__
