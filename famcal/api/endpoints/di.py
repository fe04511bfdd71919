from collections.abc import Iterator
from typing import Annotated

from fastapi import Depends

from famcal.api.di import DiContainer


def get_di() -> Iterator[DiContainer]:
    di = DiContainer()

    try:
        yield di

    finally:
        di.close()


Di = Annotated[DiContainer, Depends(get_di)]
