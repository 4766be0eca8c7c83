# speak_admin/services/exceptions.py
"""
服务层自定义异常
路由层负责把它们转换成对应的HTTP状态码。
"""


class AdminServiceError(Exception):
    """服务层异常基类"""
    pass


class AuthenticationError(AdminServiceError):
    """
    身份认证失败：账号密码错误、令牌无效/过期、会话已失效。
    """
    def __init__(self, message: str = "认证失败，请重新登录"):
        super().__init__(message)


class PermissionDeniedError(AdminServiceError):
    """
    已认证但无管理员权限，或账号已被停用。
    """
    def __init__(self, message: str = "账号没有管理员权限或已被停用"):
        super().__init__(message)


class NotFoundError(AdminServiceError):
    """
    目标记录不存在。
    """
    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity}不存在: {entity_id}")


class ValidationError(AdminServiceError, ValueError):
    """
    表单字段校验失败，在写入数据库之前抛出。
    """
    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message)
