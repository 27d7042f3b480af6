"""FastAPI server that exposes the user-facing quiz endpoints."""

from __future__ import annotations

from threading import Thread

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel
import uvicorn

from assessment_app.constants.network_constants import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    SESSION_COOKIE,
    SESSION_COOKIE_MAX_AGE,
)
from assessment_app.core.assessment_manager import AssessmentManager, SessionSnapshot
from assessment_app.core.markdown_renderer import renderer
from assessment_app.core.models import Question, UserAccount
from assessment_app.core.services.quiz_session import AttemptResult
from assessment_app.core.services.result_store import ResultSaveError
from assessment_app.server.admin_routes import create_admin_router

_ADVANCE_REJECTED_HINT = "Select an answer before moving on."

_USER_PAGE_HTML = """<!doctype html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <title>Assessment Portal</title>
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <style>
      :root { font-family: 'Inter', system-ui, sans-serif; background: #f3f4f6; color: #111827; }
      body { margin: 0 auto; padding: 1.5rem; max-width: 46rem; display: flex; flex-direction: column; gap: 1rem; }
      .card { background: #fff; border-radius: 1rem; padding: 1.5rem; box-shadow: 0 0.5rem 1.5rem rgba(0, 0, 0, 0.08); }
      .hidden { display: none !important; }
      .row { display: flex; gap: 0.75rem; align-items: center; flex-wrap: wrap; }
      .spread { justify-content: space-between; }
      input { border: 1px solid #d1d5db; border-radius: 0.75rem; padding: 0.7rem; font-size: 1rem; }
      button { border: none; border-radius: 0.75rem; padding: 0.7rem 1.4rem; font-size: 1rem; background: #1d4ed8; color: #fff; cursor: pointer; }
      button.secondary { background: #e5e7eb; color: #111827; }
      button:disabled { opacity: 0.4; cursor: not-allowed; }
      .option-button { display: block; width: 100%; text-align: left; margin-bottom: 0.75rem; background: #fff; color: #111827; border: 1px solid #d1d5db; font-weight: 600; }
      .option-button.selected { background: #dbeafe; border-color: #2563eb; }
      .stepper { display: flex; gap: 0.5rem; justify-content: center; }
      .step { width: 1.6rem; height: 1.6rem; border-radius: 999px; padding: 0; font-size: 0.75rem; background: #e5e7eb; color: #6b7280; }
      .step.answered { background: #dbeafe; color: #1d4ed8; }
      .step.current { background: #1d4ed8; color: #fff; }
      .timer { display: inline-block; padding: 0.25rem 0.75rem; border-radius: 0.75rem; font-weight: 700; font-size: 0.9rem; }
      .timer.quiz { background: #eff6ff; color: #1d4ed8; }
      .timer.question { background: #f0fdf4; color: #166534; }
      .progress { height: 0.6rem; background: #e5e7eb; border-radius: 999px; overflow: hidden; }
      .progress div { height: 100%; background: #1d4ed8; }
      .meta { color: #6b7280; font-size: 0.9rem; }
      .recommendation { background: #fef2f2; border-left: 4px solid #f87171; padding: 0.75rem; border-radius: 0.5rem; margin-bottom: 0.5rem; }
      .question-image { display: block; margin: 0 auto 1rem; max-height: 14rem; max-width: 100%; object-fit: contain; }
      #message { min-height: 1.25rem; color: #b91c1c; }
    </style>
  </head>
  <body>
    <header class=\"row spread\">
      <strong>Assessment Portal</strong>
      <span class=\"row\">
        <span id=\"user-label\" class=\"meta\"></span>
        <button id=\"profile-button\" class=\"secondary hidden\">My results</button>
        <button id=\"logout-button\" class=\"secondary hidden\">Sign out</button>
      </span>
    </header>
    <p id=\"message\"></p>

    <section class=\"card hidden\" id=\"login-card\">
      <h1>Sign in</h1>
      <div class=\"row\">
        <input id=\"email\" type=\"email\" placeholder=\"E-mail\" />
        <input id=\"password\" type=\"password\" placeholder=\"Password\" />
      </div>
      <div class=\"row\" style=\"margin-top: 1rem\">
        <button id=\"login-button\">Sign in</button>
        <button id=\"signup-button\" class=\"secondary\">Create account</button>
      </div>
    </section>

    <section class=\"card hidden\" id=\"start-card\">
      <h1>Choose a quiz</h1>
      <div id=\"quiz-list\"></div>
      <button id=\"start-all-button\">Start with all questions</button>
    </section>

    <section class=\"card hidden\" id=\"quiz-card\">
      <div id=\"stepper\" class=\"stepper\"></div>
      <div class=\"row\" style=\"justify-content: center; margin: 0.75rem 0\">
        <span id=\"quiz-timer\" class=\"timer quiz hidden\"></span>
        <span id=\"question-timer\" class=\"timer question hidden\"></span>
      </div>
      <div class=\"row spread\">
        <span id=\"progress-label\"></span>
        <span id=\"category-label\" class=\"meta\"></span>
      </div>
      <div class=\"progress\"><div id=\"progress-fill\"></div></div>
      <img id=\"question-image\" class=\"question-image hidden\" alt=\"question\" />
      <div id=\"question-container\"></div>
      <div id=\"options-container\"></div>
      <div class=\"row spread\">
        <button id=\"back-button\" class=\"secondary\">Back</button>
        <button id=\"next-button\">Next</button>
      </div>
    </section>

    <section class=\"card hidden\" id=\"result-card\">
      <h1>Test Completed!</h1>
      <p>Your score: <strong id=\"score-label\"></strong></p>
      <h3>Recommendations:</h3>
      <div id=\"recommendations\"></div>
      <div class=\"row\">
        <button id=\"save-button\">Save result to profile</button>
        <button id=\"retake-button\" class=\"secondary\">Retake Quiz</button>
      </div>
    </section>

    <section class=\"card hidden\" id=\"profile-card\">
      <h1>My results</h1>
      <div id=\"profile-results\"></div>
      <button id=\"profile-close-button\" class=\"secondary\">Back</button>
    </section>

    <script>
      const cards = ['login-card', 'start-card', 'quiz-card', 'result-card', 'profile-card'];
      const messageEl = document.getElementById('message');
      let pollHandle = null;

      function show(cardId) {
        for (const id of cards) {
          document.getElementById(id).classList.toggle('hidden', id !== cardId);
        }
      }

      function setMessage(text) {
        messageEl.textContent = text || '';
      }

      function escapeHtml(text) {
        const div = document.createElement('div');
        div.textContent = text ?? '';
        return div.innerHTML;
      }

      function formatClock(seconds) {
        const minutes = Math.floor(seconds / 60).toString().padStart(2, '0');
        const rest = (seconds % 60).toString().padStart(2, '0');
        return `${minutes}:${rest}`;
      }

      async function api(method, path, body) {
        const options = { method, headers: {} };
        if (body !== undefined) {
          options.headers['Content-Type'] = 'application/json';
          options.body = JSON.stringify(body);
        }
        const response = await fetch(path, options);
        let payload = null;
        try {
          payload = await response.json();
        } catch (error) {
          payload = null;
        }
        if (!response.ok) {
          const detail = payload && payload.detail ? payload.detail : `Request failed (${response.status})`;
          const error = new Error(typeof detail === 'string' ? detail : JSON.stringify(detail));
          error.status = response.status;
          throw error;
        }
        return payload;
      }

      function stopPolling() {
        if (pollHandle) {
          clearInterval(pollHandle);
          pollHandle = null;
        }
      }

      function startPolling() {
        stopPolling();
        pollHandle = setInterval(refreshSession, 1000);
      }

      function renderStepper(state) {
        const stepper = document.getElementById('stepper');
        stepper.innerHTML = '';
        state.answered.forEach((answered, index) => {
          const step = document.createElement('button');
          step.className = 'step' + (index === state.position ? ' current' : answered ? ' answered' : '');
          step.textContent = index + 1;
          step.disabled = index > state.position;
          step.onclick = () => sessionAction('POST', '/session/jump', { index });
          stepper.appendChild(step);
        });
      }

      function renderSession(state) {
        if (state.finished) {
          stopPolling();
          loadResult();
          return;
        }
        show('quiz-card');
        renderStepper(state);
        const question = state.question;
        const quizTimer = document.getElementById('quiz-timer');
        quizTimer.classList.toggle('hidden', state.quiz_seconds_left === null);
        if (state.quiz_seconds_left !== null) {
          quizTimer.textContent = `Quiz: ${formatClock(state.quiz_seconds_left)}`;
        }
        const questionTimer = document.getElementById('question-timer');
        questionTimer.classList.toggle('hidden', question.time_limit_seconds === null);
        questionTimer.textContent = `Question: ${state.question_seconds_left ?? '-'} s`;

        document.getElementById('progress-label').textContent = `Question ${state.position + 1} / ${state.question_count}`;
        document.getElementById('category-label').textContent = `Category: ${question.category} | Level: ${question.level}`;
        document.getElementById('progress-fill').style.width = `${Math.round(((state.position + 1) / state.question_count) * 100)}%`;

        const image = document.getElementById('question-image');
        image.classList.toggle('hidden', !question.image_url);
        if (question.image_url && image.getAttribute('src') !== question.image_url) {
          image.setAttribute('src', question.image_url);
        }
        document.getElementById('question-container').innerHTML = question.question_html;

        const optionsContainer = document.getElementById('options-container');
        optionsContainer.innerHTML = '';
        question.options.forEach((option, index) => {
          const button = document.createElement('button');
          button.className = 'option-button' + (state.selected_option_index === index ? ' selected' : '');
          button.textContent = option;
          button.onclick = () => sessionAction('POST', '/session/answer', { selected_option_index: index });
          optionsContainer.appendChild(button);
        });

        document.getElementById('back-button').disabled = state.position === 0;
        const nextButton = document.getElementById('next-button');
        nextButton.disabled = state.selected_option_index === null;
        nextButton.textContent = state.position === state.question_count - 1 ? 'Finish' : 'Next';
      }

      async function sessionAction(method, path, body) {
        try {
          const payload = await api(method, path, body);
          const state = payload.state ?? payload;
          if (payload.accepted === false && payload.message) {
            setMessage(payload.message);
          } else {
            setMessage('');
          }
          renderSession(state);
        } catch (error) {
          setMessage(error.message);
        }
      }

      async function refreshSession() {
        try {
          renderSession(await api('GET', '/session'));
        } catch (error) {
          stopPolling();
          if (error.status === 404) {
            await loadQuizzes();
          } else if (error.status === 401) {
            show('login-card');
          } else {
            setMessage(error.message);
          }
        }
      }

      async function loadResult() {
        try {
          const result = await api('GET', '/session/result');
          show('result-card');
          document.getElementById('score-label').textContent = `${result.score} / ${result.max_score}`;
          const container = document.getElementById('recommendations');
          container.innerHTML = '';
          for (const detail of result.details) {
            if (detail.is_correct) continue;
            const item = document.createElement('div');
            item.className = 'recommendation';
            const chosen = detail.user_answer === null ? 'No answer' : detail.options[detail.user_answer];
            item.innerHTML = `<strong>${escapeHtml(detail.question)}</strong>` +
              `<div>Your answer: ${escapeHtml(chosen)}</div>` +
              `<div>Correct: ${escapeHtml(detail.options[detail.correct])}</div>` +
              `<div class="meta">${detail.recommendation_html}</div>`;
            container.appendChild(item);
          }
          document.getElementById('save-button').disabled = false;
        } catch (error) {
          setMessage(error.message);
        }
      }

      async function loadQuizzes() {
        show('start-card');
        const list = document.getElementById('quiz-list');
        list.innerHTML = '';
        try {
          const quizzes = await api('GET', '/quizzes');
          for (const quiz of quizzes) {
            const row = document.createElement('div');
            row.className = 'row spread';
            row.style.marginBottom = '0.75rem';
            row.innerHTML = `<span><strong>${escapeHtml(quiz.name)}</strong> <span class="meta">${quiz.question_count} question(s)</span></span>`;
            const button = document.createElement('button');
            button.textContent = 'Start';
            button.disabled = quiz.question_count === 0;
            button.onclick = () => startQuiz(quiz.id);
            row.appendChild(button);
            list.appendChild(row);
          }
        } catch (error) {
          setMessage(error.message);
        }
      }

      async function startQuiz(quizId) {
        try {
          renderSession(await api('POST', '/session', { quiz_id: quizId }));
          setMessage('');
          startPolling();
        } catch (error) {
          setMessage(error.message);
        }
      }

      async function loadProfile() {
        stopPolling();
        show('profile-card');
        const container = document.getElementById('profile-results');
        container.innerHTML = '';
        try {
          const results = await api('GET', '/profile/results');
          if (!results.length) {
            container.textContent = 'No saved results yet.';
          }
          for (const result of results) {
            const item = document.createElement('details');
            const created = new Date(result.created_at).toLocaleString();
            item.innerHTML = `<summary>${escapeHtml(created)}: ${result.score} / ${result.total}</summary>` +
              result.answers.map((answer) =>
                `<div class="${answer.is_correct ? '' : 'recommendation'}">${escapeHtml(answer.question)}` +
                ` (${answer.is_correct ? 'correct' : 'incorrect'})</div>`).join('');
            container.appendChild(item);
          }
        } catch (error) {
          setMessage(error.message);
        }
      }

      async function loadIdentity() {
        try {
          const me = await api('GET', '/auth/me');
          document.getElementById('user-label').textContent = me.role === 'admin' ? `${me.email} (admin)` : me.email;
          document.getElementById('logout-button').classList.remove('hidden');
          document.getElementById('profile-button').classList.remove('hidden');
          await refreshSession();
          if (pollHandle === null && !document.getElementById('quiz-card').classList.contains('hidden')) {
            startPolling();
          }
        } catch (error) {
          document.getElementById('user-label').textContent = '';
          document.getElementById('logout-button').classList.add('hidden');
          document.getElementById('profile-button').classList.add('hidden');
          show('login-card');
        }
      }

      async function authenticate(path) {
        const email = document.getElementById('email').value;
        const password = document.getElementById('password').value;
        try {
          await api('POST', path, { email, password });
          setMessage('');
          await loadIdentity();
        } catch (error) {
          setMessage(error.message);
        }
      }

      document.getElementById('login-button').onclick = () => authenticate('/auth/login');
      document.getElementById('signup-button').onclick = () => authenticate('/auth/signup');
      document.getElementById('logout-button').onclick = async () => {
        stopPolling();
        await api('POST', '/auth/logout');
        await loadIdentity();
      };
      document.getElementById('profile-button').onclick = loadProfile;
      document.getElementById('profile-close-button').onclick = refreshSession;
      document.getElementById('start-all-button').onclick = () => startQuiz(null);
      document.getElementById('back-button').onclick = () => sessionAction('POST', '/session/back');
      document.getElementById('next-button').onclick = () => sessionAction('POST', '/session/next');
      document.getElementById('retake-button').onclick = async () => {
        await sessionAction('POST', '/session/reset');
        startPolling();
      };
      document.getElementById('save-button').onclick = async () => {
        const button = document.getElementById('save-button');
        button.disabled = true;
        button.textContent = 'Saving...';
        try {
          await api('POST', '/session/save');
          setMessage('');
          await loadProfile();
        } catch (error) {
          setMessage(`Could not save the result: ${error.message}`);
          button.disabled = false;
        }
        button.textContent = 'Save result to profile';
      };

      loadIdentity();
    </script>
  </body>
</html>
"""


class CredentialsPayload(BaseModel):
    """Payload schema for sign-up and sign-in."""

    email: str
    password: str


class StartPayload(BaseModel):
    """Payload schema for starting a quiz attempt."""

    quiz_id: int | None = None


class AnswerPayload(BaseModel):
    """Payload schema for selecting an option of the current question."""

    selected_option_index: int


class JumpPayload(BaseModel):
    """Payload schema for returning to an already visited question."""

    index: int


def _get_manager_dependency(manager: AssessmentManager):
    def dependency() -> AssessmentManager:
        return manager

    return dependency


def _get_user_dependency(manager: AssessmentManager):
    def dependency(request: Request) -> UserAccount:
        user = manager.resolve_user(request.cookies.get(SESSION_COOKIE))
        if user is None:
            raise HTTPException(status_code=401, detail="Please sign in first.")
        return user

    return dependency


def _get_admin_dependency(user_dep):
    def dependency(user: UserAccount = Depends(user_dep)) -> UserAccount:
        if not user.is_admin:
            raise HTTPException(status_code=403, detail="Administrator access required.")
        return user

    return dependency


def serialize_question(question: Question, *, include_answer: bool = False) -> dict[str, object]:
    payload: dict[str, object] = {
        "id": question.id,
        "category": question.category,
        "question": question.question_text,
        "question_html": renderer.render_fragment(question.question_text),
        "options": list(question.options),
        "level": question.level,
        "score": question.score,
        "image_url": question.image_url,
        "time_limit_seconds": question.time_limit_seconds,
    }
    if include_answer:
        payload["correct_option"] = question.correct_option_index
        payload["recommendation"] = question.recommendation
        payload["created_at"] = question.created_at.isoformat()
    return payload


def _serialize_snapshot(snapshot: SessionSnapshot) -> dict[str, object]:
    return {
        "quiz_id": snapshot.quiz_id,
        "position": snapshot.position,
        "question_count": snapshot.question_count,
        "question": serialize_question(snapshot.question),
        "selected_option_index": snapshot.selected_option_index,
        "answered": list(snapshot.answered),
        "quiz_seconds_left": snapshot.quiz_seconds_left,
        "question_seconds_left": snapshot.question_seconds_left,
        "finished": snapshot.finished,
        "generation": snapshot.generation,
    }


def _serialize_result(result: AttemptResult) -> dict[str, object]:
    details = []
    for detail in result.details:
        entry = detail.to_dict()
        entry["recommendation_html"] = renderer.render_fragment(detail.recommendation)
        details.append(entry)
    return {
        "score": result.score,
        "max_score": result.max_score,
        "finished": result.finished,
        "details": details,
    }


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=SESSION_COOKIE,
        value=token,
        max_age=SESSION_COOKIE_MAX_AGE,
        samesite="lax",
        httponly=True,
    )


def create_api_app(manager: AssessmentManager) -> FastAPI:
    """Create a FastAPI application wired to the provided assessment manager."""
    app = FastAPI(title="Assessment Portal API", version="0.1.0")
    manager_dep = _get_manager_dependency(manager)
    user_dep = _get_user_dependency(manager)
    admin_dep = _get_admin_dependency(user_dep)

    app.include_router(create_admin_router(manager_dep, admin_dep))

    if manager.image_store is not None:
        manager.image_store.directory.mkdir(parents=True, exist_ok=True)
        app.mount(
            manager.image_store.url_prefix,
            StaticFiles(directory=manager.image_store.directory),
            name="images",
        )

    @app.get("/", response_class=HTMLResponse)
    def serve_user_page() -> str:
        return _USER_PAGE_HTML

    @app.get("/healthz", include_in_schema=False)
    def health_get() -> dict[str, object]:
        return {"ok": True}

    # --- Authentication ---

    @app.post("/auth/signup", status_code=201)
    def sign_up(
        payload: CredentialsPayload,
        response: Response,
        manager: AssessmentManager = Depends(manager_dep),
    ) -> dict[str, object]:
        try:
            manager.sign_up(payload.email, payload.password)
            account, token = manager.sign_in(payload.email, payload.password)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        _set_session_cookie(response, token)
        return {"id": account.id, "email": account.email, "role": account.role}

    @app.post("/auth/login")
    def sign_in(
        payload: CredentialsPayload,
        response: Response,
        manager: AssessmentManager = Depends(manager_dep),
    ) -> dict[str, object]:
        try:
            account, token = manager.sign_in(payload.email, payload.password)
        except PermissionError as exc:
            raise HTTPException(status_code=401, detail=str(exc)) from exc
        _set_session_cookie(response, token)
        return {"id": account.id, "email": account.email, "role": account.role}

    @app.post("/auth/logout")
    def sign_out(
        request: Request,
        response: Response,
        manager: AssessmentManager = Depends(manager_dep),
    ) -> dict[str, object]:
        token = request.cookies.get(SESSION_COOKIE)
        if token:
            manager.sign_out(token)
        response.delete_cookie(SESSION_COOKIE)
        return {"ok": True}

    @app.get("/auth/me")
    def get_identity(user: UserAccount = Depends(user_dep)) -> dict[str, object]:
        return {"id": user.id, "email": user.email, "role": user.role}

    # --- Quizzes & sessions ---

    @app.get("/quizzes")
    def list_quizzes(
        user: UserAccount = Depends(user_dep),
        manager: AssessmentManager = Depends(manager_dep),
    ) -> list[dict[str, object]]:
        return [
            {
                "id": summary.quiz.id,
                "name": summary.quiz.name,
                "description": summary.quiz.description,
                "quiz_time_limit": summary.quiz.time_limit_seconds,
                "question_count": summary.question_count,
            }
            for summary in manager.list_quizzes()
        ]

    @app.post("/session", status_code=201)
    def start_session(
        payload: StartPayload,
        user: UserAccount = Depends(user_dep),
        manager: AssessmentManager = Depends(manager_dep),
    ) -> dict[str, object]:
        try:
            snapshot = manager.start_session(user.id, payload.quiz_id)
        except LookupError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return _serialize_snapshot(snapshot)

    @app.get("/session")
    def get_session(
        user: UserAccount = Depends(user_dep),
        manager: AssessmentManager = Depends(manager_dep),
    ) -> dict[str, object]:
        try:
            snapshot = manager.get_session(user.id)
        except LookupError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return _serialize_snapshot(snapshot)

    @app.delete("/session")
    def abandon_session(
        user: UserAccount = Depends(user_dep),
        manager: AssessmentManager = Depends(manager_dep),
    ) -> dict[str, object]:
        manager.abandon_session(user.id)
        return {"ok": True}

    @app.post("/session/answer")
    def select_answer(
        payload: AnswerPayload,
        user: UserAccount = Depends(user_dep),
        manager: AssessmentManager = Depends(manager_dep),
    ) -> dict[str, object]:
        try:
            snapshot = manager.select_answer(user.id, payload.selected_option_index)
        except LookupError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except RuntimeError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return _serialize_snapshot(snapshot)

    @app.post("/session/next")
    def advance_session(
        user: UserAccount = Depends(user_dep),
        manager: AssessmentManager = Depends(manager_dep),
    ) -> dict[str, object]:
        try:
            accepted, snapshot = manager.advance_session(user.id)
        except LookupError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return {
            "accepted": accepted,
            "message": None if accepted else _ADVANCE_REJECTED_HINT,
            "state": _serialize_snapshot(snapshot),
        }

    @app.post("/session/back")
    def go_back(
        user: UserAccount = Depends(user_dep),
        manager: AssessmentManager = Depends(manager_dep),
    ) -> dict[str, object]:
        try:
            accepted, snapshot = manager.go_back(user.id)
        except LookupError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return {"accepted": accepted, "message": None, "state": _serialize_snapshot(snapshot)}

    @app.post("/session/jump")
    def jump_to(
        payload: JumpPayload,
        user: UserAccount = Depends(user_dep),
        manager: AssessmentManager = Depends(manager_dep),
    ) -> dict[str, object]:
        try:
            accepted, snapshot = manager.jump_to(user.id, payload.index)
        except LookupError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return {"accepted": accepted, "message": None, "state": _serialize_snapshot(snapshot)}

    @app.post("/session/reset")
    def reset_session(
        user: UserAccount = Depends(user_dep),
        manager: AssessmentManager = Depends(manager_dep),
    ) -> dict[str, object]:
        try:
            snapshot = manager.reset_session(user.id)
        except LookupError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return _serialize_snapshot(snapshot)

    @app.get("/session/result")
    def get_result(
        user: UserAccount = Depends(user_dep),
        manager: AssessmentManager = Depends(manager_dep),
    ) -> dict[str, object]:
        try:
            result = manager.compute_session_result(user.id)
        except LookupError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        if not result.finished:
            raise HTTPException(status_code=409, detail="Finish the quiz to see the result.")
        return _serialize_result(result)

    @app.post("/session/save", status_code=201)
    def save_result(
        user: UserAccount = Depends(user_dep),
        manager: AssessmentManager = Depends(manager_dep),
    ) -> dict[str, object]:
        try:
            record = manager.save_session_result(user.id)
        except LookupError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except RuntimeError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        except ResultSaveError as exc:
            raise HTTPException(status_code=503, detail=str(exc)) from exc
        return record.to_dict()

    @app.get("/profile/results")
    def list_my_results(
        user: UserAccount = Depends(user_dep),
        manager: AssessmentManager = Depends(manager_dep),
    ) -> list[dict[str, object]]:
        return [record.to_dict() for record in manager.list_results_for_user(user.id)]

    return app


def start_api_server(
    manager: AssessmentManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> Thread:
    """Start the FastAPI server in a background daemon thread."""
    app = create_api_app(manager)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="AssessmentApiServer", daemon=True)
    thread.start()
    return thread
