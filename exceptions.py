"""
推荐流程的错误类型

所有错误最终都以一条可读的提示返回给前端，不做自动重试。
"""


class RecommendationError(Exception):
    """推荐服务错误基类，status_code 用于路由层转换为 HTTPException"""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ValidationError(RecommendationError):
    """考生输入缺失或不合法（分数/排名缺失、越界，选考科目不是 3 门等）"""

    status_code = 422


class NotFoundError(RecommendationError):
    """按 (院校, 专业代码) 查询详情时没有对应记录"""

    status_code = 404


class SchemaViolation(RecommendationError):
    """大模型返回的结果不符合输出结构"""

    status_code = 502


class UpstreamError(RecommendationError):
    """大模型调用本身失败（网络、服务商错误等）"""

    status_code = 502
