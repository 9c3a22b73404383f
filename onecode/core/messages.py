"""
Human readable messages returned in response envelopes
"""

ERROR_MESSAGES = {
    # Others
    "internal_server_error": "Some unknown error has occurred! Please try again later",
    "invalid_user_id": "User id is missing or not in valid format",
    "missing_user_id": "Missing user id header",

    # DB errors
    "db_error": "unable to process query with database! Please try again later",
    "unable_to_create_user": "Unable to create user! Please try again later",
    "unable_to_fetch_user": "Unable to fetch user profile",
    "user_already_created": "Profile already exists!",
    "user_profile_not_found": "Profile not found!",
    "unable_to_fetch_tracks": "Unable to fetch tracks at this moment! Please try again later",
    "unable_to_join_track": "Unable to join track at this moment! Please try again later",
    "track_already_joined": "Track is already joined by User!",
    "track_not_found": "Track not found!",
    "unable_to_fetch_exercises": "Unable to fetch exercises of the track! Please try again later",
    "unable_to_fetch_exercise_details": "Unable to fetch details of the exercise! Please try again later",
    "exercise_not_found": "Exercise not found!",
    "unable_to_create_activity": "Unable to save your submission! Please try again later",
    "unable_to_fetch_progress": "Unable to fetch progress! Please try again later",

    # Validation errors
    "invalid_code_encoding": "Code must be a valid base64 encoded string",
    "invalid_test_input": "Code could not be executed, please check your input",
    "unsupported_language": "Language of this exercise is not supported for execution",
}

RESPONSE_MESSAGES = {
    "created_user": "Created user successfully!",
    "fetched_user": "Fetched user profile successfully!",
    "fetched_stats": "Fetched user stats successfully!",
    "fetched_track": "Fetched all the tracks successfully!",
    "joined_track": "Track joined successfully!",
    "fetched_track_progress": "Fetched track progress successfully!",
    "fetched_exercises": "Fetched all exercises successfully!",
    "fetched_exercise_details": "Fetched exercise details successfully!",
    "submitted_exercise": "Code executed successfully!",
    "fetched_leaderboard": "Fetched leaderboard successfully!",
}
