"""End-to-end tests through the FastAPI app."""

from conftest import TEST_PASSWORD, make_admin, make_premium, register

COMPLETE = [("q1", "explore-ideas"), ("q2", "multiple-approaches"), ("q3", "creativity"), ("q4", "open-exploration")]

COT_FIELDS = {"role": "logical thinker", "problem": "Plan a product launch"}


def save(client, title="Launch", framework_type="cot", text="You are a logical thinker."):
    return client.post(
        "/prompts",
        data={"framework_type": framework_type, "title": title, "final_prompt_text": text},
    )


class TestPublicPages:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_home(self, client):
        assert client.get("/").status_code == 200

    def test_protected_page_redirects_to_login(self, client):
        response = client.get("/prompts", follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/auth/login?next=/prompts"

    def test_htmx_gets_hx_redirect(self, client):
        response = client.get("/prompts", headers={"HX-Request": "true"}, follow_redirects=False)
        assert response.status_code == 401
        assert response.headers["HX-Redirect"].startswith("/auth/login")

    def test_json_api_gets_401(self, client):
        response = client.get("/custom-criteria")
        assert response.status_code == 401
        assert response.json()["detail"] == "Not authenticated"


class TestAuthFlow:
    def test_register_logs_in(self, client):
        response = register(client)
        assert response.status_code == 200
        assert client.get("/auth/session-check").json()["email"] == "user@example.com"

    def test_register_rejects_weak_password(self, client):
        response = client.post("/auth/register", data={
            "name": "Ada", "email": "ada@example.com", "password": "short", "confirm_password": "short",
        })
        assert response.status_code == 400
        assert "at least 8 characters" in response.text

    def test_register_duplicate(self, client):
        register(client)
        client.get("/auth/logout")
        response = register(client, email="USER@example.com")
        assert response.status_code == 409

    def test_login_bad_password(self, client):
        register(client)
        client.get("/auth/logout")
        response = client.post("/auth/login", data={"email": "user@example.com", "password": "Wrong1234"})
        assert response.status_code == 401
        assert "Invalid email or password" in response.text

    def test_login_honours_local_next(self, client):
        register(client)
        client.get("/auth/logout")
        response = client.post(
            "/auth/login",
            data={"email": "user@example.com", "password": TEST_PASSWORD, "next": "/frameworks"},
            follow_redirects=False,
        )
        assert response.status_code == 303
        assert response.headers["location"] == "/frameworks"

    def test_login_ignores_external_next(self, client):
        register(client)
        client.get("/auth/logout")
        response = client.post(
            "/auth/login",
            data={"email": "user@example.com", "password": TEST_PASSWORD, "next": "//evil.example"},
            follow_redirects=False,
        )
        assert response.headers["location"] == "/"

    def test_logout(self, logged_in):
        logged_in.get("/auth/logout")
        assert logged_in.get("/auth/session-check").status_code == 401


class TestFrameworks:
    def test_list(self, logged_in):
        response = logged_in.get("/frameworks")
        assert response.status_code == 200
        assert "Chain-of-Thought" in response.text

    def test_form_and_unknown(self, logged_in):
        assert logged_in.get("/frameworks/tot").status_code == 200
        assert logged_in.get("/frameworks/nope").status_code == 404

    def test_generate(self, logged_in):
        response = logged_in.post("/frameworks/cot/generate", data=COT_FIELDS)
        assert response.status_code == 200
        assert "Problem: Plan a product launch" in response.text

    def test_generate_missing_field(self, logged_in):
        response = logged_in.post("/frameworks/cot/generate", data={"role": "logical thinker"})
        assert response.status_code == 400
        assert "Missing required fields for Chain-of-Thought framework: problem" in response.text

    def test_generate_iteration_limit(self, logged_in):
        response = logged_in.post("/frameworks/tot/generate", data={
            "role": "analyst", "objective": "Pick a vendor", "approaches": "9", "criteria": ["Cost"],
        })
        assert response.status_code == 400
        assert "cannot exceed 5" in response.text


class TestWizard:
    def test_full_flow(self, logged_in):
        for question_id, option_id in COMPLETE:
            response = logged_in.post(
                f"/wizard/question/{question_id}", data={"option_ids": option_id}, follow_redirects=False,
            )
            assert response.status_code == 303
        assert response.headers["location"] == "/wizard/recommendation"

        page = logged_in.get("/wizard/recommendation")
        assert page.status_code == 200
        assert "Tree-of-Thought" in page.text

        form = logged_in.get("/frameworks/tot?from_wizard=true")
        assert "strategic decision-maker with expertise in complex scenarios" in form.text

    def test_next_question_after_answer(self, logged_in):
        response = logged_in.post("/wizard/question/q1", data={"option_ids": "improve-draft"}, follow_redirects=False)
        assert response.headers["location"] == "/wizard/question/q2"

    def test_invalid_option_rerenders(self, logged_in):
        response = logged_in.post("/wizard/question/q1", data={"option_ids": "clarity"})
        assert response.status_code == 400
        assert "Invalid option IDs for question q1: clarity" in response.text

    def test_unfinished_wizard_sent_back(self, logged_in):
        logged_in.post("/wizard/question/q1", data={"option_ids": "improve-draft"})
        response = logged_in.get("/wizard/recommendation", follow_redirects=False)
        assert response.headers["location"] == "/wizard/question/q2"

    def test_reset(self, logged_in):
        logged_in.post("/wizard/question/q1", data={"option_ids": "improve-draft"})
        logged_in.post("/wizard/reset")
        response = logged_in.get("/wizard/recommendation", follow_redirects=False)
        assert response.headers["location"] == "/wizard/question/q1"

    def test_unknown_question(self, logged_in):
        assert logged_in.get("/wizard/question/q9").status_code == 404

    def test_json_recommend(self, logged_in):
        payload = {"answers": [{"questionId": q, "selectedOptionIds": [o]} for q, o in COMPLETE]}
        response = logged_in.post("/wizard/api/recommend", json=payload)
        assert response.status_code == 200
        body = response.json()
        assert body["frameworkId"] == "tot"
        assert 0 <= body["confidence"] <= 100

    def test_json_recommend_incomplete(self, logged_in):
        payload = {"answers": [{"questionId": "q1", "selectedOptionIds": ["explore-ideas"]}]}
        response = logged_in.post("/wizard/api/recommend", json=payload)
        assert response.status_code == 400
        assert response.json()["detail"] == "Missing answers for questions: q2, q3, q4"

    def test_json_recommend_null_selection(self, logged_in):
        answers = [{"questionId": q, "selectedOptionIds": [o]} for q, o in COMPLETE[:3]]
        answers.append({"questionId": "q4", "selectedOptionIds": None})
        response = logged_in.post("/wizard/api/recommend", json={"answers": answers})
        assert response.status_code == 400
        assert response.json()["detail"] == "No option selected for question: q4"

    def test_json_recommend_malformed(self, logged_in):
        response = logged_in.post("/wizard/api/recommend", json={"answers": [{"selectedOptionIds": []}]})
        assert response.status_code == 400
        assert response.json()["detail"].startswith("Malformed answers")

    def test_json_questions_hide_weights(self, logged_in):
        questions = logged_in.get("/wizard/api/questions").json()["questions"]
        assert len(questions) == 4
        assert "weights" not in questions[0]["options"][0]


class TestSavedPrompts:
    def test_save_list_and_view(self, logged_in):
        assert save(logged_in).status_code == 201
        assert "Launch" in logged_in.get("/prompts").text
        assert logged_in.get("/prompts/1").status_code == 200

    def test_save_requires_title(self, logged_in):
        assert save(logged_in, title="  ").status_code == 400

    def test_save_unknown_framework(self, logged_in):
        assert save(logged_in, framework_type="nope").status_code == 400

    def test_free_limit(self, logged_in):
        for i in range(5):
            assert save(logged_in, title=f"P{i}").status_code == 201
        response = save(logged_in, title="One too many")
        assert response.status_code == 403
        assert "Upgrade to premium for unlimited prompts" in response.text

    def test_premium_has_no_limit(self, logged_in):
        make_premium()
        for i in range(6):
            assert save(logged_in, title=f"P{i}").status_code == 201

    def test_export_is_premium_only(self, logged_in):
        save(logged_in, title="Launch plan")
        assert logged_in.get("/prompts/1/export").status_code == 403

        make_premium()
        response = logged_in.get("/prompts/1/export")
        assert response.status_code == 200
        assert response.headers["content-disposition"] == 'attachment; filename="launch_plan.txt"'
        assert response.text.startswith("# Launch plan\n")

    def test_other_users_prompt_is_404(self, client):
        register(client, email="owner@example.com")
        save(client)
        client.get("/auth/logout")
        register(client, email="other@example.com")
        assert client.get("/prompts/1").status_code == 404
        assert client.delete("/prompts/1").status_code == 404

    def test_delete(self, logged_in):
        save(logged_in)
        assert logged_in.delete("/prompts/1").status_code == 200
        assert logged_in.get("/prompts/1").status_code == 404


class TestCustomCriteria:
    def test_free_user_forbidden(self, logged_in):
        assert logged_in.get("/custom-criteria").status_code == 403

    def test_crud(self, logged_in):
        make_premium()
        created = logged_in.post("/custom-criteria", json={"name": " Speed "})
        assert created.status_code == 201
        assert created.json()["name"] == "Speed"

        assert logged_in.post("/custom-criteria", json={"name": "Speed"}).status_code == 409
        assert logged_in.post("/custom-criteria", json={"name": ""}).status_code == 400

        listed = logged_in.get("/custom-criteria").json()["criteria"]
        assert [c["name"] for c in listed] == ["Speed"]

        criteria_id = listed[0]["id"]
        assert logged_in.delete(f"/custom-criteria/{criteria_id}").status_code == 204
        assert logged_in.delete(f"/custom-criteria/{criteria_id}").status_code == 404

    def test_custom_criteria_offered_on_tot_form(self, logged_in):
        make_premium()
        logged_in.post("/custom-criteria", json={"name": "Carbon Footprint"})
        assert "Carbon Footprint" in logged_in.get("/frameworks/tot").text


class TestAccount:
    def test_settings_page(self, logged_in):
        assert logged_in.get("/account").status_code == 200

    def test_change_password(self, logged_in):
        response = logged_in.post("/account/change-password", data={
            "current_password": TEST_PASSWORD, "new_password": "NewPassword1", "confirm_password": "NewPassword1",
        })
        assert response.status_code == 200
        assert "Password changed successfully" in response.text

    def test_wrong_current_password(self, logged_in):
        response = logged_in.post("/account/change-password", data={
            "current_password": "Wrong1234", "new_password": "NewPassword1", "confirm_password": "NewPassword1",
        })
        assert response.status_code == 400
        assert "Current password is incorrect" in response.text


class TestAdmin:
    def test_non_admin_forbidden(self, logged_in):
        assert logged_in.get("/admin").status_code == 403

    def test_admin_pages(self, logged_in):
        make_admin()
        for path in ("/admin", "/admin/users", "/admin/analytics?days=7"):
            assert logged_in.get(path).status_code == 200

    def test_toggle_premium(self, logged_in):
        make_admin()
        response = logged_in.post("/admin/users/1/toggle-premium", follow_redirects=False)
        assert response.status_code == 303
        assert logged_in.get("/prompts/1/export").status_code == 404
        assert logged_in.post("/admin/users/999/toggle-premium").status_code == 404
