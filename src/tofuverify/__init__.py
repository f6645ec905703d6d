"""tofuverify - Trust-On-First-Use verification of downloaded artifacts"""

__version__ = "0.1.0"
