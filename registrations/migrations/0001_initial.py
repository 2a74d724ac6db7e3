from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='IssuedTicket',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('purchase_code', models.CharField(db_index=True, max_length=8)),
                ('attendee_name', models.CharField(blank=True, default='', max_length=255)),
                ('attendee_phone', models.CharField(blank=True, default='', max_length=50)),
                ('buyer_name', models.CharField(blank=True, default='', max_length=255)),
                ('buyer_phone', models.CharField(blank=True, default='', max_length=50)),
                ('buyer_email', models.CharField(blank=True, default='', max_length=255)),
                ('identity_document', models.CharField(blank=True, default='', max_length=50)),
                ('prime_a', models.PositiveIntegerField()),
                ('prime_b', models.PositiveIntegerField()),
                ('product', models.CharField(help_text='prime_a * prime_b', max_length=13)),
                ('pair_key', models.CharField(help_text='Sorted pair, e.g. 100003-100019', max_length=13, unique=True)),
                ('total_amount', models.CharField(blank=True, default='', max_length=50)),
                ('payment_method', models.CharField(blank=True, default='', max_length=50)),
                ('has_proof', models.CharField(default='No', max_length=2)),
                ('issued_at', models.DateTimeField()),
                ('ocr_sender', models.CharField(default='N/A', max_length=255)),
                ('ocr_receiver', models.CharField(default='N/A', max_length=255)),
                ('ocr_amount', models.CharField(default='N/A', max_length=50)),
                ('ocr_date_time', models.CharField(default='N/A', max_length=100)),
                ('validated', models.CharField(choices=[('0', 'Sin validar'), ('1', 'Validado')], default='0', max_length=1)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'ordering': ['id'],
            },
        ),
    ]
