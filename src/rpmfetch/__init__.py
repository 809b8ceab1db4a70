__title__ = 'rpmfetch'
__version__ = '0.1.0'
