from typing import Dict, List

from quiz.models import AnswerOption, Personality, Question

PERSONALITIES = [
    Personality(
        id="architect",
        name="The Architect",
        description=(
            "You are logical and structured, preferring to plan ahead and think through every detail. "
            "Your analytical mind excels at identifying patterns and creating systematic solutions. "
            "You value clarity, precision, and well-organized approaches to challenges."
        ),
        traits=["Analytical thinker", "Strategic planner", "Detail-oriented", "Methodical approach", "Values structure"],
    ),
    Personality(
        id="explorer",
        name="The Explorer",
        description=(
            "You are curious and flexible, thriving on new experiences and creative solutions. "
            "Your adaptable nature allows you to pivot quickly and embrace uncertainty. "
            "You value innovation, spontaneity, and discovering unconventional paths forward."
        ),
        traits=["Curious and open-minded", "Adaptable", "Creative problem-solver", "Embraces change", "Innovative thinking"],
    ),
    Personality(
        id="supporter",
        name="The Supporter",
        description=(
            "You are empathetic and team-focused, finding strength in collaboration and connection. "
            "Your ability to understand others makes you an excellent communicator and mediator. "
            "You value harmony, collective success, and building strong relationships."
        ),
        traits=["Empathetic listener", "Team player", "Strong communicator", "Values collaboration", "Relationship builder"],
    ),
    Personality(
        id="leader",
        name="The Leader",
        description=(
            "You are decisive and confident, naturally taking charge and driving results. "
            "Your action-oriented mindset helps teams move forward quickly and efficiently. "
            "You value accountability, clear direction, and achieving tangible outcomes."
        ),
        traits=["Decisive decision-maker", "Takes initiative", "Results-driven", "Confident communicator", "Natural motivator"],
    ),
]


def _question(qid: str, text: str, weight: int, order: int, options: List[tuple]) -> Question:
    return Question(
        id=qid,
        text=text,
        weight=weight,
        order=order,
        options=[AnswerOption(id=oid, text=otext, scores=scores) for oid, otext, scores in options],
    )


def _four_way(a: str, b: str, c: str, d: str) -> List[tuple]:
    """Options a-d each awarding 3 points to one personality, in the usual order."""
    return [
        ("a", a, {"architect": 3}),
        ("b", b, {"explorer": 3}),
        ("c", c, {"supporter": 3}),
        ("d", d, {"leader": 3}),
    ]


QUESTIONS = [
    _question("q1", "When starting a new project, you usually...", 4, 1, [
        ("a", "Create a detailed plan before taking any action", {"architect": 3, "leader": 1}),
        ("b", "Jump in and figure things out as you go", {"explorer": 3, "leader": 1}),
        ("c", "Discuss the approach with your team first", {"supporter": 3, "architect": 1}),
        ("d", "Take immediate action and adjust based on results", {"leader": 3, "explorer": 1}),
    ]),
    _question("q2", "In a group discussion, you tend to...", 3, 2, [
        ("a", "Listen carefully and synthesize different viewpoints", {"supporter": 3, "architect": 1}),
        ("b", "Propose structured frameworks to organize ideas", {"architect": 3}),
        ("c", "Challenge assumptions and suggest alternatives", {"explorer": 2, "leader": 1}),
        ("d", "Drive toward decisions and next steps", {"leader": 3}),
    ]),
    _question("q3", "When facing uncertainty, you prefer to...", 5, 3, _four_way(
        "Analyze all available data before proceeding",
        "Experiment with different approaches",
        "Seek input and support from others",
        "Make a decision and take responsibility",
    )),
    _question("q4", "Your ideal work environment is one where...", 2, 4, _four_way(
        "Processes are clear and well-documented",
        "Creativity and experimentation are encouraged",
        "People collaborate and support each other",
        "Goals are ambitious and results-focused",
    )),
    _question("q5", "When a deadline is approaching, you typically...", 4, 5, _four_way(
        "Follow your original plan and timeline",
        "Adapt your approach based on what is working",
        "Rally the team and ensure everyone is aligned",
        "Focus intensely and push to complete the work",
    )),
    _question("q6", "When learning something new, you prefer to...", 3, 6, _four_way(
        "Study the fundamentals and build a solid foundation",
        "Try things hands-on and learn from mistakes",
        "Learn alongside others in a group setting",
        "Focus on what you need to know to achieve results",
    )),
    _question("q7", "When giving feedback to a colleague, you...", 3, 7, _four_way(
        "Provide specific, objective observations",
        "Suggest creative alternatives they might not have considered",
        "Focus on understanding their perspective first",
        "Be direct about what needs to change",
    )),
    _question("q8", "During a brainstorming session, you are most likely to...", 2, 8, _four_way(
        "Evaluate ideas for feasibility and structure",
        "Generate many diverse possibilities",
        "Build on others ideas and find common ground",
        "Push the group toward actionable solutions",
    )),
    _question("q9", "When something goes wrong, your first instinct is to...", 5, 9, _four_way(
        "Investigate the root cause systematically",
        "Try a different approach immediately",
        "Check in with the team and assess impact",
        "Take ownership and fix it quickly",
    )),
    _question("q10", "Your approach to problem-solving is best described as...", 4, 10, _four_way(
        "Methodical and evidence-based",
        "Exploratory and iterative",
        "Collaborative and consensus-driven",
        "Swift and action-oriented",
    )),
]


def summary() -> Dict[str, int]:
    return {
        "personalities": len(PERSONALITIES),
        "questions": len(QUESTIONS),
        "options": sum(len(q.options) for q in QUESTIONS),
    }
