"""Install and update shared r2modman mod profiles for Steam games."""

__version__ = "1.3.0"