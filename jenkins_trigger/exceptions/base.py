class BaseJenkinsTriggerException(Exception):
    pass


class InvalidConfigurationError(BaseJenkinsTriggerException):
    pass
