"""
Error taxonomy shared by the domain, storage and API layers
"""


class ValidationError(ValueError):
    """Некорректный ввод: плохой UUID, дата, отсутствующее поле"""
    pass


class NotFoundError(LookupError):
    """Запись не найдена"""
    pass


class StorageError(Exception):
    """Ошибка хранилища (соединение, запрос). Оборачивает исходное исключение."""
    pass


class DuplicateSubscriptionError(StorageError):
    """Подписка с таким (user_id, service_name) уже существует"""
    pass
