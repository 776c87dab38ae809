class ConfigurationError(Exception):
    """配置存储基础异常类（args[0] 为面向用户的提示信息）"""

    pass


class PropertyKindError(ConfigurationError):
    """同一个 key 混用 group 与 leaf 时抛出"""

    pass


class LiteralFormatError(ConfigurationError):
    """配置字面量文本无法解析或结构不合法"""

    pass


class UnencodableTextError(ConfigurationError):
    """键或值包含无法以 UTF-8 写入配置文件的字符（例如孤立的代理码点）"""

    pass
