from classduel.db.models.class_memberships import ClassMembership
from classduel.db.models.classes import SchoolClass
from classduel.db.models.duel_answers import DuelAnswer
from classduel.db.models.duel_participants import DuelParticipant
from classduel.db.models.duel_rounds import DuelRound
from classduel.db.models.duels import Duel
from classduel.db.models.levels import Level
from classduel.db.models.question_options import QuestionOption
from classduel.db.models.questions import Question
from classduel.db.models.quiz_questions import QuizQuestion
from classduel.db.models.quizzes import Quiz
from classduel.db.models.subjects import Subject
from classduel.db.models.topics import Topic
from classduel.db.models.user_progress import UserProgress
from classduel.db.models.users import User

__all__ = [
    "ClassMembership",
    "Duel",
    "DuelAnswer",
    "DuelParticipant",
    "DuelRound",
    "Level",
    "Question",
    "QuestionOption",
    "Quiz",
    "QuizQuestion",
    "SchoolClass",
    "Subject",
    "Topic",
    "User",
    "UserProgress",
]
