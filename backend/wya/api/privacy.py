from fastapi import APIRouter

router = APIRouter(prefix="/api", tags=["privacy"])

POLICY_TITLE = "WYA Privacy Policy"
POLICY_LAST_UPDATED = "2024-11-01"

POLICY_TEXT = """\
1. What we collect
We store the name, email address and phone number you give us at signup,
the avatar you pick, and the last location your device reports while the
app is open. We keep only your most recent location; earlier positions are
overwritten.

2. Who can see it
Your position appears on other people's maps only while "Show my location"
is on. Your city appears in their contact list only while "Show my city" is
on. Anyone you block, and anyone who blocks you, sees neither.

3. Notifications
If you haven't opened the app for about a month we may send one reminder
per month. We store a record of each reminder we send.

4. Reports
Reports you file about another user are kept for review together with your
explanation.

5. Deleting your account
Deleting your account removes your sign-in identity and your stored
profile, location and preferences.

6. Third parties
Sign-in is handled by our authentication provider and push delivery by
Expo. We do not sell your data.

7. Contact
Questions about this policy can be sent to privacy@wya.app.
"""


@router.get("/privacy-policy")
async def privacy_policy():
    return {"title": POLICY_TITLE, "last_updated": POLICY_LAST_UPDATED, "content": POLICY_TEXT}
