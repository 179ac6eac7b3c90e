from enum import Enum

#enums set the fixed choices a field can take, every enum used by the models is defined here first

class ExperienceLevelEnum(str, Enum): #client's self reported programming experience from the intake form
    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"

class SessionTypeEnum(str, Enum): #kind of consultation being booked
    discovery = "Discovery"
    code_review = "CodeReview"
    architecture = "Architecture"
    training = "Training"
    debugging = "Debugging"
    follow_up = "FollowUp"

class SessionStateEnum(str, Enum):
    scheduled = "Scheduled"
    in_progress = "InProgress"
    completed = "Completed"
    followed_up = "FollowedUp"
    cancelled = "Cancelled"

class ActionItemPriorityEnum(str, Enum):
    immediate = "immediate"
    short_term = "short-term"
    long_term = "long-term"
