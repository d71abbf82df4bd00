"""
引擎异常

所有被拒绝的操作都不会修改状态 (状态对象不可变)，调用方捕获后重新选择动作即可。
"""


class CribbageError(Exception):
    """引擎异常基类"""
    pass


class IllegalPlay(CribbageError, ValueError):
    """非法出牌: 超过 31、牌不在手中、或不是该玩家的回合"""
    pass


class InvalidGo(CribbageError, ValueError):
    """非法 Go: 仍有合法出牌时宣告 Go"""
    pass


class MalformedDiscard(CribbageError, ValueError):
    """非法弃牌: 不是恰好 2 张手中的牌"""
    pass


class ExhaustedSimulationInput(CribbageError, RuntimeError):
    """模拟抽样时未见牌池不足 (说明已见牌记账出错，不应被捕获)"""
    pass
