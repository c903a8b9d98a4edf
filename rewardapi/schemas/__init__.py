from .auth import LoginPollResponse, LoginStartResponse
from .user import User, UserSnapshot
from .points import PointsBalanceResponse, PointsLedgerResponse
from .wheel import SpinResponse, WheelResponse
from .withdrawal import WithdrawalResponse, WithdrawHistoryResponse
