import argparse
import getpass
import json
import logging
import sys
from collections.abc import Callable

from logging_setup import setup_console_logging
from proctoring.client import ExamServiceClient
from proctoring.config import EXAM_SERVER_URL, TICK_INTERVAL_SECONDS
from proctoring.environment import TerminalSignalSource
from proctoring.errors import ExamNotFoundError, ExamServiceError
from proctoring.models import SessionStatus, StudentIdentity
from proctoring.runner import ExamRunner
from proctoring.session import SessionSnapshot

log = logging.getLogger(__name__)

HELP_TEXT = (
    "Commands: <number> choose option, n next, p previous, g <number> go to question, "
    "s submit, q leave"
)


def format_time(seconds: int) -> str:
    minutes, secs = divmod(max(seconds, 0), 60)
    return f"{minutes}:{secs:02d}"


def render(snapshot: SessionSnapshot) -> str:
    index = snapshot.current_question_index
    question = snapshot.current_question
    selected = snapshot.answers.get(index)
    status_line = (
        f"Question {index + 1} of {snapshot.question_count}"
        f"   time left {format_time(snapshot.time_remaining)}"
        f"   violations {snapshot.violation_count}"
    )
    if snapshot.violations:
        status_line += f" (last: {snapshot.violations[-1]})"
    lines = ["", status_line, question.text]
    for option_index, option in enumerate(question.options):
        marker = "*" if option_index == selected else " "
        lines.append(f" {marker} {option_index + 1}) {option}")
    return "\n".join(lines)


def _confirm_leave(read: Callable[[str], str]) -> bool:
    try:
        answer = read("Leave the exam? Nothing will be submitted [y/N] ")
    except (KeyboardInterrupt, EOFError):
        return True
    return answer.strip().lower() == "y"


def run_exam(
    runner: ExamRunner,
    source: TerminalSignalSource,
    read: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
) -> int:
    """Drive a started runner from line-based input until the session ends."""
    write(HELP_TEXT)
    while runner.session.is_active:
        write(render(runner.snapshot()))
        try:
            command = source.feed(read("> ")).strip().lower()
        except (KeyboardInterrupt, EOFError):
            command = "q"

        if not runner.session.is_active:
            break
        if command == "q":
            if source.attempt_unload() and not _confirm_leave(read):
                continue
            runner.close()
            write("Exam left without submitting.")
            return 1
        if command == "n":
            runner.next_question()
        elif command == "p":
            runner.previous_question()
        elif command.startswith("g "):
            target = command[2:].strip()
            if target.isdigit():
                runner.navigate(int(target) - 1)
        elif command == "s":
            runner.submit()
        elif command.isdigit():
            runner.select_answer(runner.snapshot().current_question_index, int(command) - 1)
        else:
            write(HELP_TEXT)

    status = runner.session.status
    if status is SessionStatus.TERMINATED:
        write("Exam terminated: too many integrity violations.")
    elif runner.session.time_remaining == 0:
        write("Time is up.")

    outcome = runner.wait_for_outcome()
    runner.close()
    if outcome is None or not outcome.ok:
        error = outcome.error if outcome is not None else "no response"
        write(f"Submission FAILED, your attempt was not recorded: {error}")
        return 1
    result = outcome.result
    write(f"Submitted ({status.value}). Score: {result.score}/{result.total}")
    return 0


def take_exam(args: argparse.Namespace) -> int:
    client = ExamServiceClient(args.server)
    try:
        exam = client.get_public_exam(args.exam_id)
    except ExamNotFoundError:
        print(f"Exam {args.exam_id} not found", file=sys.stderr)
        return 1
    except ExamServiceError as exc:
        print(f"Cannot load exam: {exc}", file=sys.stderr)
        return 1

    student = StudentIdentity(name=args.name, student_id=args.student_id)
    print(f"{exam.title}: {exam.question_count} questions, {exam.duration} minutes")
    with TerminalSignalSource() as source:
        runner = ExamRunner(exam, student, client, source, tick_interval=TICK_INTERVAL_SECONDS)
        runner.begin()
        try:
            return run_exam(runner, source)
        finally:
            runner.close()


def _examiner_client(args: argparse.Namespace) -> ExamServiceClient:
    client = ExamServiceClient(args.server)
    password = args.password or getpass.getpass("Password: ")
    client.login(args.email, password)
    return client


def _logout(client: ExamServiceClient) -> None:
    try:
        client.logout()
    except ExamServiceError as exc:
        log.warning("Logout failed: %s", exc)


def load_exam_file(path: str) -> dict:
    """Read an exam definition: {"title", "duration", "questions": [{"text", "options", "correct"}]}."""
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict) or not data.get("questions"):
        raise ValueError(f"{path} does not define any questions")
    return data


def register_examiner(args: argparse.Namespace) -> int:
    client = ExamServiceClient(args.server)
    password = args.password or getpass.getpass("Password: ")
    try:
        client.register(args.name, args.email, password)
    except ExamServiceError as exc:
        print(f"Registration failed: {exc}", file=sys.stderr)
        return 1
    print(f"Examiner {args.email} registered")
    return 0


def create_exam(args: argparse.Namespace) -> int:
    try:
        definition = load_exam_file(args.file)
    except (OSError, ValueError) as exc:
        print(f"Cannot read exam file: {exc}", file=sys.stderr)
        return 1

    try:
        client = _examiner_client(args)
    except ExamServiceError as exc:
        print(f"Login failed: {exc}", file=sys.stderr)
        return 1
    try:
        exam_id = client.create_exam(
            definition.get("title", ""), definition.get("duration", 0), definition["questions"]
        )
    except ExamServiceError as exc:
        print(f"Cannot create exam: {exc}", file=sys.stderr)
        return 1
    finally:
        _logout(client)
    print(f"Exam created: {exam_id}")
    return 0


def list_exams(args: argparse.Namespace) -> int:
    try:
        client = _examiner_client(args)
    except ExamServiceError as exc:
        print(f"Login failed: {exc}", file=sys.stderr)
        return 1
    try:
        exams = client.list_exams()
    except ExamServiceError as exc:
        print(f"Cannot load exams: {exc}", file=sys.stderr)
        return 1
    finally:
        _logout(client)

    for exam in exams:
        print(
            f"{exam['id']}  {exam['title']}  {exam['duration']} min, "
            f"{exam['total_marks']} questions"
        )
    if not exams:
        print("No exams yet")
    return 0


def show_results(args: argparse.Namespace) -> int:
    try:
        client = _examiner_client(args)
    except ExamServiceError as exc:
        print(f"Login failed: {exc}", file=sys.stderr)
        return 1
    try:
        attempts = client.list_attempts(args.exam_id)
    except ExamServiceError as exc:
        print(f"Cannot load results: {exc}", file=sys.stderr)
        return 1
    finally:
        _logout(client)

    for attempt in attempts:
        total = attempt.total if attempt.total is not None else "?"
        print(
            f"{attempt.student_name} ({attempt.student_id}): {attempt.score}/{total} "
            f"{attempt.status}, {len(attempt.violations)} violations"
        )
    if not attempts:
        print("No attempts yet")
    return 0


def _add_examiner_login(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", default=None)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Take proctored exams from the terminal")
    parser.add_argument("--server", default=EXAM_SERVER_URL, help="Exam service URL")
    subparsers = parser.add_subparsers(dest="command", required=True)

    take = subparsers.add_parser("take", help="Take an exam")
    take.add_argument("exam_id")
    take.add_argument("--name", required=True, help="Student name")
    take.add_argument("--student-id", required=True, help="Student identifier")
    take.set_defaults(handler=take_exam)

    register = subparsers.add_parser("register", help="Register an examiner account")
    register.add_argument("--name", required=True, help="Examiner name")
    _add_examiner_login(register)
    register.set_defaults(handler=register_examiner)

    create = subparsers.add_parser("create", help="Create an exam from a JSON file (examiner)")
    create.add_argument("file", help="Exam definition (JSON)")
    _add_examiner_login(create)
    create.set_defaults(handler=create_exam)

    exams = subparsers.add_parser("exams", help="List your exams (examiner)")
    _add_examiner_login(exams)
    exams.set_defaults(handler=list_exams)

    results = subparsers.add_parser("results", help="List attempts for an exam (examiner)")
    results.add_argument("exam_id")
    _add_examiner_login(results)
    results.set_defaults(handler=show_results)
    return parser.parse_args(argv)


def main() -> None:
    setup_console_logging()
    args = parse_args()
    sys.exit(args.handler(args))


if __name__ == "__main__":
    main()
