import json
import os

import requests

URL = "http://localhost:3000/cafe/post"
# Access token issued for the cafe account, sent as the Authorization header.
TOKEN = os.environ.get("CAFE_ACCESS_TOKEN", "YOUR_ACCESS_TOKEN")
CLUB_ID = "12345678"  # replace with the numeric id of your cafe
MENU_ID = "1"  # board the article goes to
SUBJECT = "카페 자동 게시 테스트"
CONTENT = "자동으로 게시된 글의 본문입니다"
# Up to 10 image URLs. Leave empty to send a plain text article.
IMAGES = [
    "https://example.com/images/sample.png",
]


def main():
    payload = {
        "subject": SUBJECT,
        "content": CONTENT,
        "clubid": CLUB_ID,
        "menuid": MENU_ID,
    }
    if IMAGES:
        payload["image"] = IMAGES

    headers = {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {TOKEN}",
    }
    resp = requests.post(URL, data=json.dumps(payload), headers=headers)
    print(f"Status: {resp.status_code}")
    print(f"Response: {resp.text}")


if __name__ == "__main__":
    main()
