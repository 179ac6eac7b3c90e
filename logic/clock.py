from datetime import datetime
from typing import Protocol

class Clock(Protocol): #injected so transitions can be tested without the wall clock
    def now(self) -> datetime: ...

class SystemClock:
    def now(self) -> datetime:
        return datetime.now() #naive local time, same as the model created_at defaults
