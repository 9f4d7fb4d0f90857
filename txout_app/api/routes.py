from fastapi import APIRouter  # type: ignore
from txout_app.api.outputs import router as output_router


router = APIRouter()

router.include_router(output_router, prefix="/outputs", tags=["Outputs"])
