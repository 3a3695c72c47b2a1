"""
bigip-sd: split a URL list into BigIP / other Prometheus file_sd target groups.
"""

__version__ = "0.1.0"
