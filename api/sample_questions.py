"""
api/sample_questions.py — 체험용 샘플 문제 은행
"""

from mcq_exam.models.question_model import Question

SAMPLE_QUESTIONS: list[Question] = [
    Question(
        id="sample_1",
        text="Which data structure gives O(1) average-time lookup by key?",
        options=["Linked list", "Hash table", "Binary heap", "Stack"],
        correct_index=1,
    ),
    Question(
        id="sample_2",
        text="What does HTTP status code 404 mean?",
        options=["Not Found", "Forbidden", "Moved Permanently", "Bad Gateway"],
        correct_index=0,
    ),
    Question(
        id="sample_3",
        text="Which of these is not a prime number?",
        options=["2", "3", "9", "11"],
        correct_index=2,
    ),
    Question(
        id="sample_4",
        text="In Git, which command creates a new commit from staged changes?",
        options=["git add", "git push", "git commit", "git fetch", "git stash"],
        correct_index=2,
    ),
    Question(
        id="sample_5",
        text="The Fisher-Yates shuffle produces every permutation with equal probability.",
        options=["True", "False"],
        correct_index=0,
    ),
    Question(
        id="sample_6",
        text="How many bits are in one byte?",
        options=["4", "8", "16", "32", "64", "128"],
        correct_index=1,
    ),
]
