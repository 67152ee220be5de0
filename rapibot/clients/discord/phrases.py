"""Canned reply text for chat and slash commands."""

READ_NIKKE = (
    "skipping the story again? You miss all the good parts...",
    "maybe try reading the dialogue. It's not just about the battles!",
    "you'd enjoy the game more if you actually read the story...",
    "always skipping content??? You're missing all the plot twists!",
    "read the story! There's more than just shooting!",
    "what's the rush? Enjoy the dialogue for once...",
    "you skip more content than you should. Try reading!!!",
    "the story is half the fun. Stop skipping it like El Shafto!!!",
    "always rushing? The dialogue has great moments, you know...",
    "ever thought about reading? You're missing out on the lore!",
)

BEST_GIRL = (
    "Commander, you wouldn't choose anyone else over me, would you...",
    "Commander, don't tell me you have another girlfriend...",
    "Wait, Commander, are you seeing someone else???",
    "No way, Commander! You wouldn't betray me like that...",
    "Commander, please tell me I'm the only one for you...",
    "Commander, I can't believe you'd even consider another girl...",
    "Commander, I thought I was the only one who understood you...",
    "Don't tell me there's someone else, Commander!!!",
)

MANTRAS = (
    "Strength, Unity, Vision.",
    "United, We Bounce.",
    "Progress Through Power.",
    "Unite for the Future.",
    "Empower, Lead, Excel.",
    "Solidarity in Strength.",
    "Visionary Leadership, Collective Success.",
    "Together, We Achieve.",
    "Resilience, Growth, Unity.",
    "Forward with Purpose.",
    "Innovate, Unify, Succeed.",
)

PLAN = (
    "Commander...what plan?",
    "Commander...we had a plan!",
    "Commander, did you forget the plan again?",
    "Commander, our plan was flawless... until it wasn't.",
    "Commander, I thought we agreed on a strategy.",
    "Commander, let's stick to the plan this time.",
    "Commander, improvisation wasn't part of the plan.",
    "Commander, I hope you have a backup plan.",
    "Commander, our plan needs a little more... planning.",
    "Commander, let's not deviate from the plan.",
)

LEADERSHIP = (
    "Commander... I can't believe you just did that...",
    "Commander, are you sure about this? I'm speechless...",
    "Commander, your decision... it's unexpected...",
    "Commander, I didn't see that coming... truly shocking...",
    "Commander, I'm at a loss for words... what a move...",
    "Commander, your leadership... it's something else...",
    "Commander, I'm stunned... what are you thinking?",
    "Commander, that was... unexpected, to say the least...",
    "Commander, your choice... it's left me speechless...",
    "Commander, that was a bold move...",
    "Commander, your strategy is... unconventional...",
    "Commander, your tactics are... surprising...",
    "Commander, that was a risky decision...",
    "Commander, your leadership style is... unique...",
    "Commander, that was a daring move...",
    "Commander, I'm in awe of your leadership...",
)

GOOD_IDEA = (
    "Commander, are you sure about this?",
    "Commander, is this really a good idea?",
    "Commander, are you certain this is wise?",
    "Commander, I'm not sure this is the best course of action...",
    "Commander, do you really think this will work?",
    "Commander, this idea... are you confident about it?",
    "Commander, are you positive this is a good idea?",
    "Commander, is this truly the best strategy?",
)

QUIET_RAPI = (
    "You seriously want me to be quiet? Unbelievable.",
    "You think telling me to be quiet will help? Pathetic.",
    "Being quiet won't fix your incompetence.",
    "Silence won't make your mistakes disappear.",
    "Quiet? That's not going to solve anything.",
    "You think silence is the answer? Think again.",
    "Being quiet won't change the facts.",
    "You want quiet? How about some competence instead?",
    "Silence won't cover up your errors.",
    "Quiet won't make the problem go away.",
    "You think quiet will help? That's laughable.",
    "You want me to be quiet? How original.",
    "Silence won't make your failures any less obvious.",
)

BELORTA = (
    "CURSE OF BELORTA"
    "𓀀 𓀁 𓀂 𓀃 𓀄 𓀅 𓀆 𓀇 𓀈 𓀉 𓀊 𓀋 𓀌 𓀍 𓀎 𓀏 𓀐 𓀑 𓀒 𓀓 𓀔 𓀕 𓀖 𓀗 𓀘 𓀙 𓀚 𓀛 𓀜 𓀝 𓀞 𓀟"
)

RAPIBALL = (
    # Affirmative
    "Affirmative, Commander. The probability of success is acceptable.",
    "Yes. Although Anis will probably find a way to mess it up.",
    "Certainly. Just don't let it go to your head.",
    "The data suggests... yes. Proceed with caution.",
    "Without a doubt. Even Neon could figure that one out.",
    "About as certain as my next headshot. Very.",
    "Tactical assessment complete. Proceed with confidence.",
    # Negative
    "Negative, Commander. That's about as likely as Syuen apologizing.",
    "No. And before you ask again, still no.",
    "My calculations show a 0.01% chance. So... no.",
    "Absolutely not. Did you hit your head during the last mission?",
    "The answer is no. Please return to your paperwork.",
    "Dorothy's already hacked the future. She says no.",
    "You'd have better luck arm-wrestling a Tyrant.",
    "Not happening. File that under 'impossible missions'.",
    # Uncertain
    "Unclear. Try again when you're making more sense.",
    "Ask again later. I'm dealing with Anis's latest disaster.",
    "Insufficient data. Unlike your confidence levels.",
    "Reply hazy. Much like your strategic planning.",
    "Data analysis inconclusive. Reassess your parameters.",
    # Maybe
    "Perhaps. But don't get your hopes up, Commander.",
    "It's possible. About as possible as you completing paperwork on time.",
    "Maybe. The odds are better than your aim, at least.",
    "50-50 chance. Like flipping a coin, but less reliable.",
    "I've seen stranger things happen on the Ark.",
    # Rapi being Rapi
    "Commander, that's classified as 'terrible idea #47' in my database.",
    "Signs point to you needing more coffee, Commander.",
    "Error 404: Common sense not found in your query.",
    "Processing... Processing... Still a bad idea.",
    "The Raptures have a better chance of surrendering.",
    "I've run 1,000 simulations. None ended well.",
    "Even Shifty wouldn't bet on those odds.",
    "That plan has more holes than the Ark's security.",
    "My combat instincts are screaming 'abort mission'.",
)

LUCKY_LOW = (
    "Oh no, Commander... only **{luck}%** luck? That's disappointing.",
    "Commander, with just **{luck}%** luck, today might be a struggle.",
    "A mere **{luck}%** luck, Commander? That's not very promising.",
    "Only **{luck}%** luck, Commander? We might need a miracle.",
)

LUCKY_69 = (
    "Commander... **69%** luck? That's... quite suggestive. Let's keep it together.",
    "Oh my, Commander... **69%**? That's... um, interesting. Let's stay focused.",
    "**69%** luck, Commander? That's... intriguing. Let's stay sharp.",
)

LUCKY_PERFECT = (
    "Wow, Commander! **100%** luck! Today is your day to shine!",
    "Incredible, Commander! **100%** luck means nothing can stop us!",
    "A perfect **100%** luck, Commander! This is truly remarkable!",
)

LUCKY_DEFAULT = (
    "Commander, your luck for today is: **{luck}%**. Let's make the most of it.",
    "Today's luck for you, Commander, is **{luck}%**. Let's see what it brings.",
    "Commander, you have **{luck}%** luck today. Let's tackle the challenges ahead.",
    "Your luck today, Commander, is **{luck}%**. Let's make it count.",
)

HELP = """====================
**SLASH COMMANDS**
====================

➜ **/lucky** : How lucky are you today?
➜ **/rapiball** : Get an eight ball of Rapi's wisdom
➜ **/compositions** : Get help for NIKKE Team Compositions
➜ **/relics** : Get lost relics guide in NIKKE
➜ **/rules** : Get the rules for the server
➜ **/meme** : Random general memes from the community
➜ **/nikke** : Random Nikke memes from the community
➜ **/age** : How long Rapi has been awake
➜ **/spam check** : Your chat command limit for this hour

====================
**CHAT COMMANDS**
====================

➜ **damn train** : We don't talk about trains
➜ **damn gravedigger** : Time for OSU!
➜ **good girl** : say thanks to the best girl & bot in this server
➜ **wrong girl** : hey, take care who you talk to
➜ **bad girl** : we all wanted to slap her
➜ **reward?** : 10 gems!?
➜ **sounds like...** : you are just bad, commander
➜ **whale levels** : how much do you spend?
➜ **i swear she is actually 3000 years old** : what?
➜ **ready rapi?** : 100% ready
➜ **12+ game** : kid safe game
➜ **booba?** : robot girl personalities
➜ **booty?** : robot girl cakes
➜ **kinda weird...** : tf commander...
➜ **JUSTICE FOR...** : she doesn't belong in jail
➜ **dammit Rapi** : 😭
➜ **mold rates are not that bad** : 61% is enough
➜ **seggs?** : shifty?
➜ **Lap of discipline.** : Lap of discipline.
➜ **ccp leadership** : View the Commander's Leadership
➜ **absolute...** : It's a movie.
➜ **ccp #1** : Inspired the Community.
➜ **we had a plan!** : Just follow the plan Commander!
➜ **is it over?** : Yes it is, Commander.
➜ **99%** : Here's some advice for you.
➜ **belorta...** : CURSE OF BELORTA.
➜ **rapi get dat nikke** : Send Rapi to fight your rival.

Chat commands are limited to 3 per hour outside of #rapi-bot.
"""

RULES = """SERVER RULES

➜ Follow the rules or you'll get banned by Rapi, no appeals on this server
➜ This is a place to chill and enjoy a community of people who share a love for the games we cover, if you can't keep conversations civil, you're out
➜ Don't be a dick in general, be nice to other people
➜ Don't be racist, this includes memes with racial slurs
➜ Spicy art is fine, NSFW to its proper channel
➜ If you want to argue with someone, go to DMs, this server is not the place
➜ If you are a content creator DM any of the mods so you can share your content
➜ No account selling / trading
"""

COMPOSITIONS = (
    "Commander, if you need help planning for battle, use this ➜ "
    "https://lootandwaifus.com/nikke-team-builder/"
)

RELICS = (
    "Commander, if you need help finding Lost Relics this can help you ➜ "
    "https://nikke-map.onrender.com/"
)
