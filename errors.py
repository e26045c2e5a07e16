class VolumeBotError(Exception):
    pass


class ConfigError(VolumeBotError, EnvironmentError):
    pass


class PoolStateError(VolumeBotError):
    pass


class QuoteError(VolumeBotError):
    pass


class SwapError(VolumeBotError):
    pass
