# File: src/rcon_core/exceptions.py
"""
RCON 核心库 - 异常体系 (Exceptions)

定义库内统一使用的异常类，以便上层应用（如 CLI/GUI）能进行精细的错误处理。
所有异常都携带足够的上下文 (期望值 / 实际值)，便于记录日志或分支处理。
"""


class RconError(Exception):
    """RCON 核心库的所有内部异常的基类。

    上层应用可以通过捕获此异常来处理所有由 rcon-core 抛出的已知错误。
    """

    pass


class ConfigError(RconError):
    """配置加载或校验失败。

    触发场景:
    1. 缺少必要字段 (如 server_ip)。
    2. 字段格式错误 (如端口越界、超时为负数)。
    3. 找不到配置文件或环境变量。
    """

    pass


# =========================================================================
# 网络层 (I/O 级别)
# =========================================================================


class NetworkError(RconError):
    """网络层面的错误 (I/O 级别)。

    核心库不会自动重试，上层逻辑可以选择重连。
    """

    pass


class ConnectError(NetworkError):
    """建立 TCP 连接失败 (DNS 解析失败、连接被拒绝、连接超时)。"""

    pass


class WriteError(NetworkError):
    """发送数据包失败。"""

    pass


class ReadError(NetworkError):
    """接收数据包失败。"""

    pass


class ShortRead(ReadError):
    """数据流被截断或对端已关闭，未能读满所需的字节数。"""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"数据不完整: 期望 {expected} 字节, 实际 {actual} 字节")


# =========================================================================
# 协议层 (逻辑级别)
# =========================================================================


class ProtocolError(RconError):
    """协议交互错误 (逻辑级别)。

    触发场景:
    1. 数据包长度不足或结构损坏。
    2. 收到非预期的响应类型。
    3. 响应的关联 ID 与请求不匹配。
    """

    pass


class FrameTooSmall(ProtocolError):
    """声明的包长度小于协议最小值，必须在读取包体之前中止。"""

    def __init__(self, size: int, minimum: int) -> None:
        self.size = size
        self.minimum = minimum
        super().__init__(f"包长度小于最小值: size={size}, min={minimum}")


class FrameTooLarge(ProtocolError):
    """编码后的完整帧超过协议允许的最大长度。"""

    def __init__(self, size: int, limit: int) -> None:
        self.size = size
        self.limit = limit
        super().__init__(f"包长度超出最大限制: len={size}, max={limit}")


class MalformedTrailer(ProtocolError):
    """包体不足以容纳 2 字节结束符。"""

    def __init__(self, length: int) -> None:
        self.length = length
        super().__init__(f"异常的包体大小: len={length}")


class ProtocolMismatch(ProtocolError):
    """收到了非预期类型的响应包。"""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"不匹配的响应类型: expected={expected}, type={actual}")


class CorrelationMismatch(ProtocolError):
    """响应包的关联 ID 与刚发出的请求不一致。

    连接被假定为严格顺序的，因此这被视为协议违规，不会自动重新同步。
    """

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"响应 ID 不匹配: origin_id={expected}, current_id={actual}"
        )


# =========================================================================
# 认证与状态机
# =========================================================================


class AuthError(RconError):
    """认证被拒绝 (业务层面的失败)。"""

    pass


class AuthFailed(AuthError):
    """服务器以 -1 关联 ID 回复认证请求，即密码错误。

    会话保持在已连接状态，调用方可以使用其他密码重试。
    """

    def __init__(self, message: str = "认证失败: 密码校验未通过") -> None:
        super().__init__(message)


class StateError(RconError):
    """状态机错误 (FSM Violation)。

    触发场景:
    1. 未连接时尝试认证。
    2. 已认证后重复认证。
    3. 会话关闭后继续使用。
    """

    pass


class NotAuthenticated(StateError):
    """在认证成功之前调用了命令执行。"""

    def __init__(self, message: str = "未认证: 请先调用 authenticate()") -> None:
        super().__init__(message)
