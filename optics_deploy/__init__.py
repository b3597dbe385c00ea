"""Chain and security configuration for deploying the optics messaging bridge"""

__version__ = "0.1.0"
