"""Store Protocol 接口定义

StateStore 只持有一个当前值：get 读取，set 整体替换，不合并、不保留历史。
持久化 / 共享实现属于外部协作方，只需满足这两个方法。
"""

from typing import Protocol, TypeVar

TState = TypeVar("TState")


class StateStore(Protocol[TState]):
    """状态存储接口

    get_state() 按引用返回；调用方与 reducer 必须构造新值，
    不得就地修改返回的对象（store 本身不强制不可变）。
    """

    def get_state(self) -> TState:
        """读取当前状态"""
        ...

    def set_state(self, state: TState) -> None:
        """整体替换当前状态"""
        ...
