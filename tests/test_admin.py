from unittest import mock

from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from models import User, Folder, Video
from tests.base import AppTestCase


class AccessControlTest(AppTestCase):
    ADMIN_POSTS = ["/admin/add-user", "/admin/delete-user", "/admin/add-folder",
                   "/admin/delete-folder", "/admin/add-video", "/admin/delete-video"]

    def test_anonymous_is_redirected_to_login(self):
        self.assertEqual(self.client.get("/admin").status_code, 302)
        for url in self.ADMIN_POSTS:
            resp = self.client.post(url, data={"name": "x", "id": "1"})
            self.assertEqual(resp.status_code, 302, url)
            self.assertTrue(resp.headers["Location"].endswith("/"), url)

    def test_plain_user_gets_forbidden(self):
        self.make_user()
        self.login("alice", "pw-alice")
        self.assertEqual(self.client.get("/admin").status_code, 403)
        for url in self.ADMIN_POSTS:
            self.assertEqual(self.client.post(url, data={"name": "x"}).status_code, 403, url)
        self.assertEqual(self.query(lambda: Folder.query.count()), 0)

    def test_db_debug_endpoint(self):
        self.login()
        resp = self.client.get("/__db")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json()["user_count"], 1)


class UserAdminTest(AppTestCase):
    def setUp(self):
        super().setUp()
        self.login()

    def usernames(self):
        return self.query(lambda: sorted(u.username for u in User.query.all()))

    def test_dashboard_lists_everything(self):
        self.client.post("/admin/add-folder", data={"name": "Lectures"})
        self.client.post("/admin/add-video", data={"title": "Loose", "filename": "loose.mp4"})
        html = self.client.get("/admin").get_data(as_text=True)
        for text in ("admin", "Lectures", "Loose", "loose.mp4"):
            self.assertIn(text, html)

    def test_add_user_defaults_to_user_role(self):
        resp = self.client.post("/admin/add-user", data={"username": "bob", "password": "pw"},
                                follow_redirects=True)
        self.assertIn(b"User bob added", resp.data)
        role = self.query(lambda: User.query.filter_by(username="bob").one().role)
        self.assertEqual(role, "user")

    def test_add_admin_user(self):
        self.client.post("/admin/add-user", data={"username": "root2", "password": "pw", "role": "admin"})
        self.assertEqual(self.query(lambda: User.query.filter_by(username="root2").one().role), "admin")

    def test_add_user_validation(self):
        cases = [
            ({"username": "", "password": "pw"}, b"Username and password are required"),
            ({"username": "carl", "password": ""}, b"Username and password are required"),
            ({"username": "carl", "password": "pw", "role": "root"}, b"Unknown role"),
            ({"username": "admin", "password": "pw"}, b"already taken"),
        ]
        for data, message in cases:
            resp = self.client.post("/admin/add-user", data=data, follow_redirects=True)
            self.assertIn(message, resp.data)
        self.assertEqual(self.usernames(), ["admin"])

    def test_cannot_delete_own_account(self):
        admin_id = self.query(lambda: User.query.filter_by(username="admin").one().id)
        self.make_user()
        resp = self.client.post("/admin/delete-user", data={"id": str(admin_id)}, follow_redirects=True)
        self.assertIn(b"You cannot delete your own account", resp.data)
        self.assertEqual(self.usernames(), ["admin", "alice"])

    def test_delete_other_user(self):
        uid = self.make_user()
        self.client.post("/admin/delete-user", data={"id": str(uid)})
        self.assertEqual(self.usernames(), ["admin"])

    def test_delete_unknown_user(self):
        resp = self.client.post("/admin/delete-user", data={"id": "999"}, follow_redirects=True)
        self.assertIn(b"User not found", resp.data)
        resp = self.client.post("/admin/delete-user", data={"id": "abc"}, follow_redirects=True)
        self.assertIn(b"Invalid user id", resp.data)

    def test_persistence_error_is_not_leaked(self):
        with mock.patch.object(db.session, "commit", side_effect=SQLAlchemyError("disk I/O boom")):
            resp = self.client.post("/admin/add-user", data={"username": "bob", "password": "pw"},
                                    follow_redirects=True)
        self.assertIn(b"Internal error", resp.data)
        self.assertNotIn(b"boom", resp.data)
        self.assertEqual(self.usernames(), ["admin"])


class FolderVideoAdminTest(AppTestCase):
    def setUp(self):
        super().setUp()
        self.login()

    def test_scenario_cascade_delete(self):
        self.client.post("/admin/add-folder", data={"name": "Lectures"})
        folder_id = self.query(lambda: Folder.query.filter_by(name="Lectures").one().id)
        self.client.post("/admin/add-video",
                         data={"title": "L1", "filename": "l1.mp4", "folder_id": str(folder_id)})
        self.client.post("/admin/add-video",
                         data={"title": "L2", "filename": "l2.mp4", "folder_id": str(folder_id)})
        self.client.post("/admin/add-video", data={"title": "Other", "filename": "o.mp4", "folder_id": ""})
        self.assertEqual(self.query(lambda: Video.query.filter_by(folder_id=folder_id).count()), 2)

        self.client.post("/admin/delete-folder", data={"id": str(folder_id)})
        self.assertIsNone(self.query(lambda: db.session.get(Folder, folder_id)))
        self.assertEqual(self.query(lambda: Video.query.filter_by(folder_id=folder_id).count()), 0)
        self.assertEqual(self.query(lambda: [v.title for v in Video.query.all()]), ["Other"])

        resp = self.client.get(f"/videos/folder/{folder_id}")
        self.assertEqual(resp.status_code, 302)
        self.assertTrue(resp.headers["Location"].endswith("/videos"))

    def test_cascade_delete_is_atomic(self):
        self.client.post("/admin/add-folder", data={"name": "Keep"})
        fid = self.query(lambda: Folder.query.one().id)
        self.client.post("/admin/add-video", data={"title": "V", "filename": "v.mp4", "folder_id": str(fid)})
        with mock.patch.object(db.session, "commit", side_effect=SQLAlchemyError("fail")):
            self.client.post("/admin/delete-folder", data={"id": str(fid)})
        self.assertIsNotNone(self.query(lambda: db.session.get(Folder, fid)))
        self.assertEqual(self.query(lambda: Video.query.count()), 1)

    def test_blank_folder_means_unfiled(self):
        for raw in ("", "   ", "null", "None", "NULL"):
            self.client.post("/admin/add-video", data={"title": "T", "filename": "t.mp4", "folder_id": raw})
        self.client.post("/admin/add-video", data={"title": "T", "filename": "t.mp4"})
        self.assertEqual(self.query(lambda: [v.folder_id for v in Video.query.all()]), [None] * 6)

    def test_add_video_validation(self):
        cases = [
            ({"title": "", "filename": "x.mp4"}, b"Title and filename are required"),
            ({"title": "T", "filename": "x.mp4", "folder_id": "abc"}, b"Invalid folder id"),
            ({"title": "T", "filename": "x.mp4", "folder_id": "42"}, b"Folder 42 does not exist"),
        ]
        for data, message in cases:
            resp = self.client.post("/admin/add-video", data=data, follow_redirects=True)
            self.assertIn(message, resp.data)
        self.assertEqual(self.query(lambda: Video.query.count()), 0)

    def test_folder_names_need_not_be_unique(self):
        self.client.post("/admin/add-folder", data={"name": "Same"})
        self.client.post("/admin/add-folder", data={"name": "Same"})
        self.assertEqual(self.query(lambda: Folder.query.filter_by(name="Same").count()), 2)

    def test_add_folder_requires_name(self):
        resp = self.client.post("/admin/add-folder", data={"name": "  "}, follow_redirects=True)
        self.assertIn(b"Folder name is required", resp.data)

    def test_delete_video(self):
        self.client.post("/admin/add-video", data={"title": "T", "filename": "t.mp4"})
        vid = self.query(lambda: Video.query.one().id)
        self.client.post("/admin/delete-video", data={"id": str(vid)})
        self.assertEqual(self.query(lambda: Video.query.count()), 0)
        resp = self.client.post("/admin/delete-video", data={"id": str(vid)}, follow_redirects=True)
        self.assertIn(b"not found", resp.data)

    def test_delete_unknown_folder(self):
        resp = self.client.post("/admin/delete-folder", data={"id": "7"}, follow_redirects=True)
        self.assertIn(b"Folder 7 not found", resp.data)

    def test_overlong_values_are_rejected(self):
        cases = [
            ("/admin/add-folder", {"name": "f" * 161}, b"Folder name is too long"),
            ("/admin/add-video", {"title": "t" * 201, "filename": "x.mp4"}, b"Title is too long"),
            ("/admin/add-video", {"title": "T", "filename": "x" * 601}, b"Filename is too long"),
            ("/admin/add-user", {"username": "u" * 81, "password": "pw"}, b"Username is too long"),
        ]
        for url, data, message in cases:
            resp = self.client.post(url, data=data, follow_redirects=True)
            self.assertIn(message, resp.data, url)
        self.assertEqual(self.query(lambda: Folder.query.count()), 0)
        self.assertEqual(self.query(lambda: Video.query.count()), 0)
        self.assertEqual(self.query(lambda: User.query.count()), 1)

    def test_values_at_the_limit_are_accepted(self):
        self.client.post("/admin/add-folder", data={"name": "f" * 160})
        self.client.post("/admin/add-video", data={"title": "t" * 200, "filename": "x" * 600})
        self.assertEqual(self.query(lambda: Folder.query.count()), 1)
        self.assertEqual(self.query(lambda: Video.query.count()), 1)
