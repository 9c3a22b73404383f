from fastapi import APIRouter, Depends, Query

from onecode.core.messages import RESPONSE_MESSAGES
from onecode.dependencies import Services, get_current_user_id, get_services
from onecode.exercises.models import SubmitExerciseRequest, SubmissionResponse

router = APIRouter(tags=["Exercises"])


@router.get("/exercises")
async def get_exercises_in_track(
    id: str = Query(..., description="Track id"),
    services: Services = Depends(get_services),
):
    """Fetch all available exercises in a track"""
    exercises = await services.exercises.list_track_exercises(id)
    return {"data": exercises, "message": RESPONSE_MESSAGES["fetched_exercises"], "status": 200}


@router.get("/exercises/{exercise_id}")
async def get_exercise_details(exercise_id: str, services: Services = Depends(get_services)):
    details = await services.exercises.get_exercise_details(exercise_id)
    return {"data": details, "message": RESPONSE_MESSAGES["fetched_exercise_details"], "status": 200}


@router.post("/exercises/{exercise_id}/submit")
async def submit_exercise(
    exercise_id: str,
    body: SubmitExerciseRequest,
    user_id: str = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    """Run the user's code against the exercise's hidden tests and score it"""
    result = await services.evaluator.evaluate(exercise_id, user_id, body.code)
    data = SubmissionResponse(**result.to_dict())
    return {"data": data.model_dump(), "message": RESPONSE_MESSAGES["submitted_exercise"], "status": 200}
